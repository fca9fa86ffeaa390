import copy
import pickle
import unittest

from bigrational import (
    InvalidDenominatorError,
    NullArgumentError,
    ParseError,
    Rational,
    UnsupportedDeserializationError,
)


class _RawState:
    """Pickles as an attempt to restore Rational fields directly."""

    def __init__(self, numerator, denominator):
        self.state = {"_numerator": numerator, "_denominator": denominator}

    def __reduce__(self):
        return (Rational, (), self.state)


class _UnreducedPair:
    """Pickles as a Rational whose payload was never reduced."""

    def __reduce__(self):
        return (Rational, (2, -4))


class ExternalPairTests(unittest.TestCase):
    def test_to_pair(self):
        self.assertEqual(Rational(-6, 8).to_pair(), (-3, 4))

    def test_from_pair_revalidates(self):
        self.assertEqual(Rational.from_pair((2, -4)).to_pair(), (-1, 2))
        self.assertEqual(Rational.from_pair([0, -9]).to_pair(), (0, 1))

    def test_from_pair_rejects_bad_payloads(self):
        with self.assertRaises(InvalidDenominatorError):
            Rational.from_pair((1, 0))
        with self.assertRaises(NullArgumentError):
            Rational.from_pair(None)
        with self.assertRaises(NullArgumentError):
            Rational.from_pair((1, None))
        for payload in ((1, 2, 3), (1,), 5, "12", b"12"):
            with self.subTest(payload=payload):
                with self.assertRaises(ParseError):
                    Rational.from_pair(payload)


class PickleTests(unittest.TestCase):
    def test_round_trip_all_protocols(self):
        value = Rational(-(10**25), 3)
        for protocol in range(pickle.HIGHEST_PROTOCOL + 1):
            with self.subTest(protocol=protocol):
                restored = pickle.loads(pickle.dumps(value, protocol=protocol))
                self.assertIs(type(restored), Rational)
                self.assertEqual(restored, value)

    def test_unreduced_payload_is_normalized(self):
        restored = pickle.loads(pickle.dumps(_UnreducedPair()))
        self.assertEqual(restored.to_pair(), (-1, 2))

    def test_raw_state_restore_is_refused(self):
        payload = pickle.dumps(_RawState(2, -4))
        with self.assertRaises(UnsupportedDeserializationError):
            pickle.loads(payload)

    def test_setstate_is_refused(self):
        value = Rational(1, 2)
        with self.assertRaises(UnsupportedDeserializationError):
            value.__setstate__({"_numerator": 2, "_denominator": 4})
        self.assertEqual(value.to_pair(), (1, 2))

    def test_refusal_is_an_unpickling_error(self):
        self.assertTrue(issubclass(UnsupportedDeserializationError, pickle.UnpicklingError))


class ImmutabilityTests(unittest.TestCase):
    def test_copies_share_the_instance(self):
        value = Rational(5, 9)
        self.assertIs(copy.copy(value), value)
        self.assertIs(copy.deepcopy(value), value)

    def test_fields_cannot_be_assigned(self):
        value = Rational(1, 2)
        with self.assertRaises(AttributeError):
            value._numerator = 2
        with self.assertRaises(AttributeError):
            value.numerator = 2
        with self.assertRaises(AttributeError):
            del value._denominator
        self.assertEqual(value.to_pair(), (1, 2))

    def test_cannot_be_subclassed(self):
        with self.assertRaises(TypeError):
            class _Spoof(Rational):  # noqa: F841
                pass


if __name__ == "__main__":  # pragma: no cover - direct execution helper
    unittest.main()
