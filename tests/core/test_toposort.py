import unittest

from scalar_aad.core.engine import toposort
from scalar_aad.core.var import ADVar
from tests._tape_case import TapeTestCase


class TestToposort(TapeTestCase):
    def _consumers(self):
        consumers = {i: set() for i in range(len(self.tape))}
        for i, rec in enumerate(self.tape.records):
            if rec is not None:
                for operand in rec.operands:
                    consumers[operand].add(i)
        return consumers

    def _reachable(self, root):
        seen, stack = set(), [root]
        while stack:
            i = stack.pop()
            if i in seen:
                continue
            seen.add(i)
            rec = self.tape.records[i]
            if rec is not None:
                stack.extend(rec.operands)
        return seen

    def assertValidOrder(self, order, root):
        reachable = self._reachable(root)
        self.assertEqual(len(order), len(set(order)), "node visited twice")
        self.assertEqual(set(order), reachable)
        self.assertEqual(order[0], root)
        position = {idx: k for k, idx in enumerate(order)}
        consumers = self._consumers()
        for idx in order:
            for consumer in consumers[idx] & reachable:
                self.assertLess(position[consumer], position[idx])

    def test_simple_sum_order(self):
        a, b = ADVar(1.0), ADVar(2.0)
        c = a + b
        self.assertEqual(toposort(c), [c.index, b.index, a.index])

    def test_self_use_appears_once(self):
        a = ADVar(1.0)
        b = a + a
        self.assertEqual(toposort(b), [b.index, a.index])

    def test_diamond(self):
        a = ADVar(2.0)
        b = a * 3.0
        c = a ** 2
        d = b + c
        self.assertValidOrder(toposort(d), d.index)

    def test_larger_dag(self):
        xs = [ADVar(float(i)) for i in range(6)]
        layer = [xs[i] * xs[(i + 1) % 6] for i in range(6)]
        acc = layer[0]
        for node in layer[1:]:
            acc = acc + node - xs[0]
        y = acc ** 2 + (-acc)
        self.assertValidOrder(toposort(y), y.index)

    def test_excludes_unreachable(self):
        a, b = ADVar(1.0), ADVar(2.0)
        _ = b * b
        y = a * 2.0
        order = toposort(y)
        self.assertNotIn(b.index, order)
        self.assertValidOrder(order, y.index)

    def test_deterministic(self):
        a, b = ADVar(1.0), ADVar(2.0)
        y = (a * b + a) * (b - a)
        self.assertEqual(toposort(y), toposort(y))

    def test_multiple_roots(self):
        a = ADVar(1.0)
        y1 = a * 2.0
        y2 = a + y1
        order = toposort([y1, y2])
        self.assertEqual(len(order), len(set(order)))
        self.assertEqual(set(order), self._reachable(y1.index) | self._reachable(y2.index))
        self.assertLess(order.index(y2.index), order.index(y1.index))

    def test_deep_chain(self):
        x = ADVar(0.0)
        y = x
        for _ in range(5000):
            y = -y
        order = toposort(y)
        self.assertEqual(len(order), 5001)
        self.assertEqual(order[0], y.index)
        self.assertEqual(order[-1], x.index)


if __name__ == "__main__":
    unittest.main()
