import unittest
from decimal import Decimal
from unittest.mock import patch

from void_break.config import TestingConfig
from void_break.exceptions import GameLogicException, ValidationException
from void_break.utils.slot_tester import SlotTester, main


class TestSlotTester(unittest.TestCase):

    def test_bet_must_be_on_the_ladder(self):
        with self.assertRaises(ValidationException):
            SlotTester(num_spins=1, bet_amount="3.33", seed=1, config_class=TestingConfig)
        with self.assertRaises(ValidationException):
            SlotTester(num_spins=1, bet_amount="abc", seed=1, config_class=TestingConfig)

        tester = SlotTester(num_spins=1, bet_amount=2, seed=1, config_class=TestingConfig)
        self.assertEqual(tester.bet_amount, Decimal("2.00"))
        self.assertEqual(tester.session.bet_amount, Decimal("2.00"))

    @patch('builtins.print')
    def test_small_seeded_run(self, _print):
        tester = SlotTester(num_spins=50, bet_amount="1.00", seed=7, config_class=TestingConfig)
        tester.run_simulation()

        self.assertEqual(tester.paid_spins, 50)
        self.assertEqual(tester.total_bet, Decimal("50.00"))
        self.assertEqual(tester.spins_played, tester.paid_spins + tester.bonus_spins)
        self.assertFalse(tester.session.bonus.active)
        self.assertEqual(sum(tester.cascade_depths.values()), tester.spins_played)
        self.assertEqual(len(tester.wins_per_spin), tester.spins_played)
        self.assertGreaterEqual(tester.overall_rtp, 0.0)
        self.assertLessEqual(tester.hit_frequency, 100.0)
        self.assertAlmostEqual(
            tester.overall_rtp, tester.base_game_rtp_contribution + tester.bonus_rtp_contribution, places=6)

    @patch('builtins.print')
    def test_runs_are_reproducible(self, _print):
        results = []
        for _ in range(2):
            tester = SlotTester(num_spins=30, bet_amount="0.50", seed=11, config_class=TestingConfig)
            tester.run_simulation()
            results.append((tester.total_win, tester.hit_count, dict(tester.cascade_depths)))
        self.assertEqual(results[0], results[1])

    @patch('builtins.print')
    def test_bonus_round_is_played_out(self, _print):
        tester = SlotTester(num_spins=1, bet_amount="1.00", seed=3, config_class=TestingConfig)
        tester.session.set_meter(100)
        tester.session.complete_event_horizon()

        tester.run_simulation()

        self.assertEqual(tester.paid_spins, 1)
        self.assertFalse(tester.session.bonus.active)
        self.assertGreaterEqual(len(tester.bonus_data), 1)
        self.assertEqual(tester.bonus_data[0]['num_spins'], 20)
        # The paid spin after the round may trigger another one; every round runs its full 20 spins.
        self.assertEqual(tester.bonus_spins, 20 * len(tester.bonus_data))
        self.assertEqual(tester.total_bonus_win, sum((d['total_win'] for d in tester.bonus_data), Decimal("0")))

    def test_refused_spin_raises(self):
        tester = SlotTester(num_spins=1, bet_amount="1.00", seed=3, config_class=TestingConfig)
        tester.session.trigger_event_horizon()
        with self.assertRaises(GameLogicException):
            tester._simulate_one_spin()

    @patch('builtins.print')
    def test_no_spins_leaves_statistics_empty(self, _print):
        tester = SlotTester(num_spins=0, bet_amount="1.00", seed=3, config_class=TestingConfig)
        tester.run_simulation()
        self.assertEqual(tester.spins_played, 0)
        self.assertEqual(tester.overall_rtp, 0.0)

    @patch('builtins.print')
    def test_main(self, _print):
        tester = main(["--num_spins", "20", "--bet_amount", "0.20", "--seed", "5"])
        self.assertEqual(tester.paid_spins, 20)
        self.assertEqual(tester.bet_amount, Decimal("0.20"))

    @patch('builtins.print')
    def test_main_rejects_bad_bet(self, _print):
        with self.assertRaises(SystemExit):
            main(["--num_spins", "1", "--bet_amount", "7.77"])


if __name__ == '__main__':
    unittest.main()
