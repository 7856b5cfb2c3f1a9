import unittest

import numpy as np

from scalar_aad.core import tape as tape_mod
from scalar_aad.core.errors import NegativeExponentError, TapeMismatchError
from scalar_aad.core.node import OpTag
from scalar_aad.core.tape import use_tape
from scalar_aad.core.var import ADVar
from scalar_aad.ops import add, mul, neg, pow, sub
from tests._tape_case import TapeTestCase


class TestRecording(TapeTestCase):
    def test_operators_record_tagged_nodes(self):
        a, b = ADVar(2.0), ADVar(3.0)
        cases = [
            (a + b, OpTag.ADD, 5.0),
            (a - b, OpTag.SUB, -1.0),
            (a * b, OpTag.MUL, 6.0),
        ]
        for out, tag, val in cases:
            with self.subTest(tag=tag):
                rec = self.tape.records[out.index]
                self.assertIs(rec.op_tag, tag)
                self.assertEqual(rec.operands, (a.index, b.index))
                self.assertIsNone(rec.exponent)
                self.assertEqual(out.val, val)

    def test_unary_records(self):
        a = ADVar(2.0)
        n = -a
        p = a ** 3
        self.assertEqual(self.tape.records[n.index].operands, (a.index,))
        self.assertIs(self.tape.records[n.index].op_tag, OpTag.NEG)
        self.assertEqual(self.tape.records[p.index].exponent, 3)
        self.assertEqual(p.val, 8.0)

    def test_functional_forms_match_operators(self):
        a, b = ADVar(7.0), ADVar(2.0)
        self.assertEqual(add(a, b).val, 9.0)
        self.assertEqual(sub(a, b).val, 5.0)
        self.assertEqual(mul(a, b).val, 14.0)
        self.assertEqual(neg(a).val, -7.0)
        self.assertEqual(pow(a, 2).val, 49.0)

    def test_self_operands_share_index(self):
        a = ADVar(1.5)
        b = a * a
        self.assertEqual(self.tape.records[b.index].operands, (a.index, a.index))

    def test_operands_are_not_copied(self):
        a = ADVar(1.0)
        _ = a + 2.0
        # a itself, the lifted 2.0 and the sum
        self.assertEqual(len(self.tape), 3)


class TestConstants(TapeTestCase):
    def test_reflected_operators(self):
        x = ADVar(3.0)
        y1 = 1 - x
        y2 = 2 * x
        y3 = 0.5 + x
        self.assertEqual((y1.val, y2.val, y3.val), (-2.0, 6.0, 3.5))
        y = y1 + y2 + y3
        y.backward()
        self.assertEqual(x.adj, -1.0 + 2.0 + 1.0)

    def test_constants_land_on_operand_tape(self):
        with use_tape() as other:
            x = ADVar(1.0)
        y = x + 4.0
        self.assertIs(y.tape, other)
        self.assertEqual(len(self.tape), 0)

    def test_plain_numbers_use_active_tape(self):
        y = add(1.0, 2.0)
        self.assertIs(y.tape, tape_mod.global_tape)
        self.assertEqual(y.val, 3.0)

    def test_unsupported_operand(self):
        x = ADVar(1.0)
        with self.assertRaises(TypeError):
            _ = x + "1"
        with self.assertRaises(TypeError):
            _ = x * None


class TestPowDomain(TapeTestCase):
    def test_zero_exponent_on_zero_base(self):
        x = ADVar(0.0)
        y = x ** 0
        y.backward()
        self.assertEqual(y.val, 1.0)
        self.assertEqual(x.adj, 0.0)

    def test_numpy_integer_exponent(self):
        x = ADVar(2.0)
        self.assertEqual((x ** np.int64(4)).val, 16.0)

    def test_negative_exponent(self):
        x = ADVar(2.0)
        with self.assertRaises(NegativeExponentError):
            _ = x ** -1
        with self.assertRaises(ValueError):
            pow(x, -3)

    def test_non_integer_exponent(self):
        x = ADVar(2.0)
        for bad in (2.5, 2.0, True, "2", ADVar(2.0)):
            with self.subTest(bad=bad):
                with self.assertRaises(TypeError):
                    _ = x ** bad

    def test_number_to_advar_power_unsupported(self):
        x = ADVar(2.0)
        with self.assertRaises(TypeError):
            _ = 2 ** x


class TestTapeMismatch(TapeTestCase):
    def test_operands_on_different_tapes(self):
        a = ADVar(1.0)
        with use_tape():
            b = ADVar(2.0)
        for op in (add, sub, mul):
            with self.subTest(op=op.__name__):
                with self.assertRaises(TapeMismatchError) as cm:
                    op(a, b)
                self.assertEqual(cm.exception.op, op.__name__)


if __name__ == "__main__":
    unittest.main()
