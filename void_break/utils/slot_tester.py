import argparse
import random
from decimal import Decimal, InvalidOperation

import numpy as np

from void_break.config import Config
from void_break.constants import BET_LEVELS
from void_break.exceptions import GameLogicException, ValidationException
from void_break.services.game_session import GameSession


class SlotTester:
    """
    Monte-Carlo simulator for VOID BREAK.

    Plays `num_spins` paid base-game spins through GameSession.play_spin().
    Free spins awarded by the Event Horizon bonus are played out in between
    and cost nothing.
    """

    def __init__(self, num_spins, bet_amount, seed=None, config_class=Config):
        self.num_spins = num_spins
        self.bet_amount = self._parse_bet(bet_amount)
        self.seed = seed
        rng = random.Random(seed) if seed is not None else None
        self.session = GameSession(config=config_class, rng=rng)
        self.session.set_bet_index(BET_LEVELS.index(self.bet_amount))

        # Statistics
        self.total_bet = Decimal("0")
        self.total_win = Decimal("0")
        self.spins_played = 0
        self.paid_spins = 0
        self.bonus_spins = 0
        self.hit_count = 0
        self.bonus_triggers = 0
        self.total_bonus_win = Decimal("0")
        self.bonus_data = []  # one entry per completed bonus round
        self.cascade_depths = {}
        self.wins_by_multiplier = {}
        self.wins_per_spin = []

        # Derived
        self.overall_rtp = 0.0
        self.hit_frequency = 0.0
        self.bonus_frequency = 0.0
        self.avg_bonus_win = 0.0
        self.base_game_rtp_contribution = 0.0
        self.bonus_rtp_contribution = 0.0
        self.volatility_index = 0.0

    @staticmethod
    def _parse_bet(bet_amount):
        try:
            bet = Decimal(str(bet_amount)).quantize(Decimal("0.01"))
        except InvalidOperation:
            bet = None
        if bet not in BET_LEVELS:
            raise ValidationException(
                f"Bet amount {bet_amount} is not a bet level. Valid levels: {[str(b) for b in BET_LEVELS]}",
                details={'bet_amount': str(bet_amount)}
            )
        return bet

    def run_simulation(self):
        print(f"INFO: Starting simulation of {self.num_spins} paid spins at {self.bet_amount} per spin (seed={self.seed}).")
        progress_interval = max(1, self.num_spins // 10)

        while self.paid_spins < self.num_spins or self.session.bonus.active:
            self._simulate_one_spin()
            if not self.session.bonus.active and self.paid_spins % progress_interval == 0:
                print(f"INFO: Completed {self.paid_spins}/{self.num_spins} paid spins...")

        self.calculate_derived_statistics()
        print("INFO: Simulation finished.")

    def _simulate_one_spin(self):
        was_bonus = self.session.bonus.active
        bonus_spins_before = self.session.bonus.spins_used

        result = self.session.play_spin()
        if result is None:
            raise GameLogicException(
                f"Session refused a spin in state {self.session.state.value}",
                details={'spins_played': self.spins_played}
            )

        self.spins_played += 1
        if result.is_bonus:
            self.bonus_spins += 1
        else:
            self.paid_spins += 1
            self.total_bet += result.bet_amount

        self._collect_spin_statistics(result)

        if not was_bonus and self.session.bonus.active:
            self.bonus_triggers += 1
        elif was_bonus and not self.session.bonus.active:
            bonus_total = self.session.last_bonus_total or Decimal("0")
            self.total_bonus_win += bonus_total
            self.bonus_data.append({
                'total_win': bonus_total,
                'num_spins': bonus_spins_before + 1,
            })
        return result

    def _collect_spin_statistics(self, result):
        self.total_win += result.total_win
        self.wins_per_spin.append(float(result.total_win))

        if result.total_win > 0:
            self.hit_count += 1

        depth = len(result.steps)
        self.cascade_depths[depth] = self.cascade_depths.get(depth, 0) + 1

        multiplier_category = int(round(result.win_multiplier))
        self.wins_by_multiplier[multiplier_category] = self.wins_by_multiplier.get(multiplier_category, 0) + 1

    def calculate_derived_statistics(self):
        if self.spins_played == 0:
            print("Warning: No spins were simulated. Cannot calculate derived statistics.")
            return

        total_bet = float(self.total_bet)
        self.overall_rtp = (float(self.total_win) / total_bet) * 100 if total_bet > 0 else 0.0
        self.hit_frequency = (self.hit_count / self.spins_played) * 100
        self.bonus_frequency = (self.bonus_triggers / self.paid_spins) * 100 if self.paid_spins > 0 else 0.0
        self.avg_bonus_win = float(self.total_bonus_win) / len(self.bonus_data) if self.bonus_data else 0.0

        base_game_win = float(self.total_win - self.total_bonus_win)
        self.base_game_rtp_contribution = (base_game_win / total_bet) * 100 if total_bet > 0 else 0.0
        self.bonus_rtp_contribution = (float(self.total_bonus_win) / total_bet) * 100 if total_bet > 0 else 0.0

        # Volatility Index: standard deviation of per-spin wins in units of bet
        self.volatility_index = float(np.std(self.wins_per_spin)) / float(self.bet_amount)

    def print_summary_statistics(self):
        print("\n--- Simulation Summary ---")
        print(f"Paid Spins: {self.paid_spins} (plus {self.bonus_spins} free spins)")
        print(f"Bet Amount Per Spin: {self.bet_amount}")
        print(f"Total Wagered: {self.total_bet}")
        print(f"Total Won: {self.total_win}")

        print("\n--- Detailed Metrics ---")
        print(f"Overall RTP: {self.overall_rtp:.2f}%")
        print(f"Hit Frequency: {self.hit_frequency:.2f}% ({self.hit_count} wins out of {self.spins_played} spins)")
        print(f"Bonus Trigger Frequency: {self.bonus_frequency:.2f}% ({self.bonus_triggers} triggers in {self.paid_spins} paid spins)")
        print(f"Average Bonus Win: {self.avg_bonus_win:.2f} (Total from bonuses: {self.total_bonus_win})")
        print(f"Base Game RTP Contribution: {self.base_game_rtp_contribution:.2f}%")
        print(f"Bonus Game RTP Contribution: {self.bonus_rtp_contribution:.2f}%")
        print(f"Volatility Index (Win StdDev / Bet): {self.volatility_index:.4f}")

        print("\nCascade Depth Distribution:")
        for depth, count in sorted(self.cascade_depths.items()):
            print(f"  {depth} cascades: {count} times ({count / self.spins_played * 100:.2f}%)")

        print("\nWin Distribution (by Bet Multiplier):")
        for mult, count in sorted(self.wins_by_multiplier.items()):
            print(f"  {mult}x Bet: {count} times ({count / self.spins_played * 100:.2f}%)")


def main(argv=None):
    parser = argparse.ArgumentParser(description="VOID BREAK Tester - Simulates play to analyze RTP and other metrics.")
    parser.add_argument("--num_spins", type=int, default=10000, help="Number of paid spins to simulate.")
    parser.add_argument("--bet_amount", type=str, default="1.00",
                        help=f"Bet per spin, one of: {', '.join(str(b) for b in BET_LEVELS)}.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for a reproducible run.")

    args = parser.parse_args(argv)

    print("--- Initializing VOID BREAK Tester ---")
    try:
        tester = SlotTester(num_spins=args.num_spins, bet_amount=args.bet_amount, seed=args.seed)
    except ValidationException as e:
        parser.error(e.status_message)
    tester.run_simulation()
    tester.print_summary_statistics()
    print("--- VOID BREAK Tester run finished ---")
    return tester


if __name__ == "__main__":
    main()
