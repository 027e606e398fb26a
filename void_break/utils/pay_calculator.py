from decimal import Decimal

from void_break.constants import PAY_TABLE, PAY_TIER_BOUNDS


def get_pay_tier(cluster_size):
    """
    Maps a cluster size to its pay tier index.
    Tiers: 0 = 5-7, 1 = 8-11, 2 = 12-15, 3 = 16+.
    Sizes below the first bound are not clusters; they map to tier 0 but
    never reach the calculator through find_clusters.
    """
    tier = 0
    for index, lower_bound in enumerate(PAY_TIER_BOUNDS):
        if cluster_size >= lower_bound:
            tier = index
    return tier


def cluster_pay(cluster):
    """Bet multiplier for a single cluster. WILD/SCATTER have no pay row and return 0."""
    pay_row = PAY_TABLE.get(cluster.symbol)
    if not pay_row:
        return Decimal("0")
    tier = get_pay_tier(cluster.size)
    if tier >= len(pay_row):
        return Decimal("0")
    return pay_row[tier]


def calculate_step_win(clusters):
    """
    Sums the pay multipliers of all clusters in one cascade step.

    Returns:
        dict: {"total_multiplier": Decimal, "cluster_wins": [{"symbol", "size", "tier", "multiplier"}]}
    """
    total_multiplier = Decimal("0")
    cluster_wins = []
    for cluster in clusters:
        multiplier = cluster_pay(cluster)
        total_multiplier += multiplier
        cluster_wins.append({
            "symbol": cluster.symbol,
            "size": cluster.size,
            "tier": get_pay_tier(cluster.size),
            "multiplier": multiplier,
        })
    return {"total_multiplier": total_multiplier, "cluster_wins": cluster_wins}


def calculate_total_win(cascade_steps, bet_amount, step_multipliers=None):
    """
    Calculates the win for a whole spin.

    Args:
        cascade_steps (list[CascadeStep]): Output of resolve_cascades.
        bet_amount (Decimal | int | str): Bet for the spin.
        step_multipliers (list[int], optional): Bubble multiplier applied on top of each
            step's cluster pays. Missing entries count as 1.

    Returns:
        dict: {"total_win": Decimal, "steps": [{"multiplier", "bubble_multiplier", "cluster_wins", "win"}]}
    """
    bet = Decimal(str(bet_amount))
    step_multipliers = step_multipliers or []
    total_win = Decimal("0")
    steps = []

    for index, step in enumerate(cascade_steps):
        result = calculate_step_win(step.clusters)
        bubble_multiplier = step_multipliers[index] if index < len(step_multipliers) else 1
        step_win = result["total_multiplier"] * bet * bubble_multiplier
        total_win += step_win
        steps.append({
            "multiplier": result["total_multiplier"],
            "bubble_multiplier": bubble_multiplier,
            "cluster_wins": result["cluster_wins"],
            "win": step_win,
        })

    return {"total_win": total_win, "steps": steps}
