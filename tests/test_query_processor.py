import random
import threading
import unittest

from boolean_retrieval import (
    QueryProcessor, QuerySyntaxError, Term, Not, build_index, difference, evaluate,
    intersect, parse, positional_intersect, union,
)

DOCS = ["the cat sat", "the dog ran", "cats and dogs"]


class TestMerges(unittest.TestCase):
    def test_against_python_sets(self):
        rng = random.Random(7)
        for _ in range(200):
            a = sorted(rng.sample(range(50), rng.randint(0, 20)))
            b = sorted(rng.sample(range(50), rng.randint(0, 20)))
            self.assertEqual(intersect(a, b), sorted(set(a) & set(b)))
            self.assertEqual(union(a, b), sorted(set(a) | set(b)))
            self.assertEqual(difference(a, b), sorted(set(a) - set(b)))

    def test_difference_from_range(self):
        self.assertEqual(difference(range(5), [1, 3]), [0, 2, 4])
        self.assertEqual(difference(range(0), [1]), [])


class TestQueryProcessor(unittest.TestCase):
    def setUp(self):
        self.index = build_index(DOCS)
        self.qp = QueryProcessor(self.index)

    def test_end_to_end(self):
        self.assertEqual(self.qp.search("cat AND sat"), [0])
        self.assertEqual(self.qp.search("dog OR cat"), [0, 1])
        self.assertEqual(self.qp.search("NOT dog"), [0, 2])
        self.assertEqual(self.qp.search("the AND NOT dog"), [0])

    def test_precedence(self):
        # "a OR b AND c" == "a OR (b AND c)"
        self.assertEqual(self.qp.search("cats OR the AND ran"), [1, 2])
        self.assertEqual(self.qp.search("(cats OR the) AND ran"), [1])

    def test_unknown_term(self):
        self.assertEqual(self.qp.search("unicorn"), [])
        self.assertEqual(self.qp.search("unicorn AND cat"), [])
        self.assertEqual(self.qp.search("NOT unicorn"), [0, 1, 2])

    def test_double_negation(self):
        for query in ["cat", "the", "unicorn", "dog OR sat", "NOT ran"]:
            with self.subTest(query=query):
                self.assertEqual(self.qp.search(f"NOT (NOT ({query}))"), self.qp.search(query))

    def test_operators_are_set_operations(self):
        the, dog = set(self.qp.search("the")), set(self.qp.search("dog"))
        self.assertEqual(set(self.qp.search("the AND dog")), the & dog)
        self.assertEqual(set(self.qp.search("the OR dog")), the | dog)
        self.assertEqual(set(self.qp.search("NOT dog")), set(range(3)) - dog)

    def test_query_normalization(self):
        self.assertEqual(self.qp.search("CAT, AND Sat!"), [0])

    def test_malformed(self):
        for query in ["a AND", "(a OR b", ""]:
            with self.subTest(query=query):
                with self.assertRaises(SyntaxError):
                    self.qp.search(query)
        with self.assertRaises(QuerySyntaxError):
            self.qp.search("cat dog")

    def test_result_is_a_copy(self):
        result = self.qp.search("the")
        result.append(99)
        self.assertEqual(self.qp.search("the"), [0, 1])

    def test_search_titles(self):
        index = build_index(DOCS, titles=["a.txt", "b.txt", "c.txt"])
        qp = QueryProcessor(index)
        self.assertEqual(qp.search_titles("dogs OR ran"), [(1, "b.txt"), (2, "c.txt")])

    def test_unknown_node(self):
        with self.assertRaises(TypeError):
            evaluate("cat", self.index)

    def test_concurrent_queries(self):
        results = {}

        def run(q):
            results[q] = self.qp.search(q)

        queries = ["cat AND sat", "dog OR cat", "NOT dog", "the AND NOT dog"]
        threads = [threading.Thread(target=run, args=(q,)) for q in queries]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        self.assertEqual(results, {
            "cat AND sat": [0], "dog OR cat": [0, 1], "NOT dog": [0, 2], "the AND NOT dog": [0],
        })


class TestEmptyCorpus(unittest.TestCase):
    def test_every_query_is_empty(self):
        qp = QueryProcessor(build_index([]))
        for query in ["cat", "NOT cat", "a OR NOT (b AND c)"]:
            with self.subTest(query=query):
                self.assertEqual(qp.search(query), [])

    def test_evaluate_ast_directly(self):
        index = build_index(["x y", "y"])
        self.assertEqual(evaluate(parse("y AND NOT x"), index), [1])
        self.assertEqual(evaluate(Not(Term("")), index), [0, 1])


class TestLongQueries(unittest.TestCase):
    def setUp(self):
        self.qp = QueryProcessor(build_index(DOCS))

    def test_long_and_chain(self):
        self.assertEqual(self.qp.search(" AND ".join(["the"] * 1500)), [0, 1])

    def test_long_or_chain(self):
        self.assertEqual(self.qp.search(" OR ".join(["dogs", "sat"] * 800)), [0, 2])

    def test_long_not_run(self):
        self.assertEqual(self.qp.search("NOT " * 1200 + "dog"), [1])
        self.assertEqual(self.qp.search("NOT " * 1201 + "dog"), [0, 2])

    def test_too_deep_parentheses(self):
        with self.assertRaises(QuerySyntaxError):
            self.qp.search("(" * 600 + "dog" + ")" * 600)
        self.assertEqual(self.qp.search("(" * 80 + "dog" + ")" * 80), [1])


class TestProximity(unittest.TestCase):
    def setUp(self):
        self.index = build_index(["alpha beta gamma", "alpha x x beta", "beta alpha"])
        self.qp = QueryProcessor(self.index)

    def test_positional_intersect(self):
        a = [(0, [1, 5]), (2, [0])]
        b = [(0, [7]), (1, [0]), (2, [3])]
        self.assertEqual(positional_intersect(a, b, 2), [(0, [7])])
        self.assertEqual(positional_intersect(a, b, 3), [(0, [7]), (2, [3])])

    def test_window(self):
        self.assertEqual(self.qp.search_proximity("alpha beta /1"), [0, 2])
        self.assertEqual(self.qp.search_proximity("alpha beta /3"), [0, 1, 2])
        self.assertEqual(self.qp.search_proximity("alpha beta gamma /1"), [0])

    def test_single_and_unknown_terms(self):
        self.assertEqual(self.qp.search_proximity("alpha /5"), [0, 1, 2])
        self.assertEqual(self.qp.search_proximity("alpha omega /2"), [])

    def test_run_dispatch(self):
        self.assertEqual(self.qp.run("alpha beta /3"), [0, 1, 2])
        self.assertEqual(self.qp.run("alpha AND gamma"), [0])
        with self.assertRaises(QuerySyntaxError):
            self.qp.run("alpha AND beta /2")


if __name__ == "__main__":
    unittest.main()
