import unittest
from unittest.mock import patch

from casino.core.exceptions import InvalidRigColor, InvalidRigNumber, RouletteError
from casino.core.rng import SeededRNG, TrueRNG, make_rng
from casino.core.roulette.pockets import ALL_POCKETS, DOUBLE_ZERO, Color, get_color
from casino.core.roulette.rig import RigController, RigState
from casino.core.roulette.wheel import Wheel


class TestRigController(unittest.TestCase):

    def setUp(self):
        self.rig = RigController()

    def test_starts_inactive(self):
        self.assertFalse(self.rig.is_active())
        self.assertEqual(self.rig.state, RigState())

    def test_set_and_clear(self):
        state = self.rig.set_rig(number=17)
        self.assertTrue(state.active)
        self.assertEqual(state.rigged_number, 17)
        self.assertIsNone(state.rigged_color)

        self.rig.clear_rig()
        self.assertFalse(self.rig.is_active())

    def test_double_zero_label(self):
        self.assertEqual(self.rig.set_rig(number="00").rigged_number, DOUBLE_ZERO)

    def test_invalid_number_rejected_when_set(self):
        self.rig.set_rig(color=Color.RED)
        for bad in (37.5, 38, -1, "37", "x"):
            with self.assertRaises(InvalidRigNumber):
                self.rig.set_rig(number=bad)
        # Previous rig untouched
        self.assertEqual(self.rig.state.rigged_color, Color.RED)

    def test_invalid_color_rejected_when_set(self):
        self.rig.set_rig(number=9)
        for bad in ("Purple", "red", 3):
            with self.assertRaises(InvalidRigColor):
                self.rig.set_rig(color=bad)
        self.assertEqual(self.rig.state.rigged_number, 9)
        self.assertIsNone(self.rig.state.rigged_color)

    def test_invalid_color_is_a_roulette_error(self):
        with self.assertLogs("roulette.rig", level="WARNING") as logs:
            with self.assertRaises(RouletteError):
                self.rig.set_rig(color="Blue")
        self.assertIn("Rejected rig color 'Blue'", logs.output[0])
        self.assertFalse(self.rig.is_active())

    def test_color_accepts_enum_value(self):
        self.assertEqual(self.rig.set_rig(color="Green").rigged_color, Color.GREEN)

    def test_setting_nothing_is_a_no_op(self):
        self.rig.set_rig()
        self.assertFalse(self.rig.is_active())


class TestWheel(unittest.TestCase):

    def test_fair_spin_covers_the_wheel(self):
        wheel = Wheel(SeededRNG(1234))
        seen = {wheel.spin().pocket for _ in range(2000)}
        self.assertEqual(seen, set(ALL_POCKETS))

    def test_fair_spin_reports_natural_color(self):
        wheel = Wheel(SeededRNG(7))
        for _ in range(200):
            outcome = wheel.spin()
            self.assertEqual(outcome.color, get_color(outcome.pocket))
            self.assertFalse(outcome.rigged)

    def test_rigged_number_is_deterministic(self):
        rig = RigController()
        rig.set_rig(number=17)
        for seed in range(20):
            outcome = Wheel(SeededRNG(seed)).spin(rig.state)
            self.assertEqual(outcome.pocket, 17)
            self.assertEqual(outcome.color, Color.BLACK)
            self.assertTrue(outcome.rigged)

    def test_rigged_number_with_color(self):
        # The number wins; its own color is reported
        rig = RigController()
        rig.set_rig(number=17, color=Color.RED)
        outcome = Wheel().spin(rig.state)
        self.assertEqual(outcome.pocket, 17)
        self.assertEqual(outcome.color, Color.BLACK)
        self.assertIs(outcome.rig, rig.state)

    def test_fair_outcome_has_no_rig(self):
        self.assertIsNone(Wheel(SeededRNG(3)).spin().rig)

    def test_rigged_color_only(self):
        rig = RigController()
        rig.set_rig(color=Color.BLACK)
        wheel = Wheel(SeededRNG(99))
        for _ in range(100):
            outcome = wheel.spin(rig.state)
            self.assertEqual(get_color(outcome.pocket), Color.BLACK)
            self.assertEqual(outcome.color, Color.BLACK)

    def test_green_rig_lands_on_both_zeros(self):
        rig = RigController()
        rig.set_rig(color=Color.GREEN)
        wheel = Wheel(SeededRNG(3))
        seen = {wheel.spin(rig.state).pocket for _ in range(200)}
        self.assertEqual(seen, {0, DOUBLE_ZERO})

    def test_green_rig_choices(self):
        rig = RigController()
        rig.set_rig(color=Color.GREEN)
        with patch.object(TrueRNG, "random_choice", return_value=DOUBLE_ZERO) as choice:
            outcome = Wheel(TrueRNG()).spin(rig.state)
        choice.assert_called_once_with([0, DOUBLE_ZERO])
        self.assertEqual(outcome.pocket, DOUBLE_ZERO)

    def test_spin_leaves_rig_alone(self):
        rig = RigController()
        rig.set_rig(number=5)
        Wheel().spin(rig.state)
        self.assertTrue(rig.is_active())
        self.assertEqual(rig.state.rigged_number, 5)

    def test_outcome_slot(self):
        rig = RigController()
        rig.set_rig(number="00")
        outcome = Wheel().spin(rig.state)
        self.assertEqual(outcome.label, "00")
        self.assertEqual(outcome.slot, 19)


class TestRng(unittest.TestCase):

    def test_make_rng(self):
        self.assertIsInstance(make_rng(), TrueRNG)
        self.assertIsInstance(make_rng(5), SeededRNG)

    def test_seeded_is_reproducible(self):
        self.assertEqual(SeededRNG(42).random_int(0, 37), SeededRNG(42).random_int(0, 37))
        first = SeededRNG(42)
        second = SeededRNG(42)
        self.assertEqual(
            [first.random_choice(ALL_POCKETS) for _ in range(50)],
            [second.random_choice(ALL_POCKETS) for _ in range(50)],
        )

    def test_bounds(self):
        with self.assertRaises(ValueError):
            TrueRNG.random_int(5, 1)
        with self.assertRaises(IndexError):
            TrueRNG.random_choice([])
        self.assertTrue(0 <= TrueRNG.random_int(0, 37) <= 37)


if __name__ == '__main__':
    unittest.main()
