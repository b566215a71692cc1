import unittest

from skillmap_ai.ai_core.common.exceptions import (
    InvalidStatus,
    InvalidTransition,
    NodeNotFound,
    RepositoryLookupError,
    VerificationFailed,
)
from skillmap_ai.ai_core.domain.node_status import NodeStatus
from skillmap_ai.ai_core.domain.roadmap_edge import RoadmapEdge
from skillmap_ai.ai_core.domain.roadmap_node import RoadmapNode
from skillmap_ai.ai_core.service.progress.progression_engine import ProgressionEngine, parse_status
from skillmap_ai.ai_core.tests.fakes import FakeRepositoryChecker, chain_graph


def _statuses(graph):
    return {node.node_id: node.status for node in graph.nodes}


class ProgressionEngineTests(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = ProgressionEngine()

    def test_single_level_cascade(self) -> None:
        """
        A -> B -> C에서 A 완료는 B만, 이어서 B 완료는 C를 해제하는지 검증합니다.

        @returns {None} 테스트만 수행합니다.
        """
        graph = chain_graph()
        first = self.engine.set_status(graph, "A", "completed")
        self.assertEqual(
            _statuses(first.graph),
            {"A": NodeStatus.COMPLETED, "B": NodeStatus.PENDING, "C": NodeStatus.LOCKED},
        )
        self.assertEqual(first.unlocked, ["B"])

        second = self.engine.set_status(first.graph, "B", "completed")
        self.assertEqual(
            _statuses(second.graph),
            {"A": NodeStatus.COMPLETED, "B": NodeStatus.COMPLETED, "C": NodeStatus.PENDING},
        )
        self.assertEqual(second.unlocked, ["C"])

    def test_input_graph_is_not_mutated(self) -> None:
        graph = chain_graph()
        self.engine.set_status(graph, "A", NodeStatus.COMPLETED)
        self.assertEqual(set(_statuses(graph).values()), {NodeStatus.LOCKED})

    def test_cascade_never_touches_completed_or_pending_dependents(self) -> None:
        graph = chain_graph(statuses=[NodeStatus.PENDING, NodeStatus.COMPLETED, NodeStatus.LOCKED])
        result = self.engine.set_status(graph, "A", "completed")
        self.assertEqual(_statuses(result.graph)["B"], NodeStatus.COMPLETED)
        self.assertEqual(result.unlocked, [])

    def test_first_completed_prerequisite_unlocks(self) -> None:
        graph = chain_graph()
        graph.nodes.append(RoadmapNode(node_id="D", label="Topic D"))
        graph.edges.append(RoadmapEdge(edge_id="eD-C", source="D", target="C"))
        result = self.engine.set_status(graph, "D", "completed")
        self.assertEqual(_statuses(result.graph)["C"], NodeStatus.PENDING)

    def test_resubmitting_completed_is_noop(self) -> None:
        graph = chain_graph(statuses=[NodeStatus.COMPLETED, NodeStatus.LOCKED, NodeStatus.LOCKED])
        result = self.engine.set_status(graph, "A", "completed")
        self.assertFalse(result.changed)
        self.assertIs(result.graph, graph)
        self.assertEqual(_statuses(result.graph)["B"], NodeStatus.LOCKED)

    def test_completed_is_terminal_by_default(self) -> None:
        graph = chain_graph(statuses=[NodeStatus.COMPLETED, NodeStatus.PENDING, NodeStatus.LOCKED])
        for target in ("pending", "locked"):
            with self.subTest(target=target):
                with self.assertRaises(InvalidTransition):
                    self.engine.set_status(graph, "A", target)

    def test_reopen_policy_allows_explicit_revert_only(self) -> None:
        engine = ProgressionEngine(allow_reopen=True)
        graph = chain_graph(statuses=[NodeStatus.COMPLETED, NodeStatus.PENDING, NodeStatus.LOCKED])
        result = engine.set_status(graph, "A", "pending")
        self.assertEqual(
            _statuses(result.graph),
            {"A": NodeStatus.PENDING, "B": NodeStatus.PENDING, "C": NodeStatus.LOCKED},
        )

    def test_non_completed_transitions_are_free(self) -> None:
        graph = chain_graph(statuses=[NodeStatus.PENDING, NodeStatus.LOCKED, NodeStatus.LOCKED])
        result = self.engine.set_status(graph, "A", "locked")
        self.assertEqual(_statuses(result.graph)["A"], NodeStatus.LOCKED)
        self.assertEqual(result.previous_status, NodeStatus.PENDING)

    def test_unknown_node(self) -> None:
        with self.assertRaises(NodeNotFound):
            self.engine.set_status(chain_graph(), "Z", "completed")

    def test_invalid_status(self) -> None:
        with self.assertRaises(InvalidStatus):
            self.engine.set_status(chain_graph(), "A", "done")
        self.assertEqual(parse_status(" Completed "), NodeStatus.COMPLETED)


class VerifyAndCompleteTests(unittest.TestCase):
    def test_existing_repository_completes_and_cascades(self) -> None:
        checker = FakeRepositoryChecker(exists=True)
        engine = ProgressionEngine(repository_checker=checker)
        result = engine.verify_and_complete(chain_graph(), "A", "octo", "project")
        self.assertEqual(checker.calls, [("octo", "project")])
        self.assertEqual(_statuses(result.graph)["A"], NodeStatus.COMPLETED)
        self.assertEqual(_statuses(result.graph)["B"], NodeStatus.PENDING)

    def test_missing_repository_changes_nothing(self) -> None:
        graph = chain_graph()
        engine = ProgressionEngine(repository_checker=FakeRepositoryChecker(exists=False))
        with self.assertRaises(VerificationFailed):
            engine.verify_and_complete(graph, "A", "octo", "missing")
        self.assertEqual(_statuses(graph)["A"], NodeStatus.LOCKED)

    def test_lookup_error_is_verification_failure(self) -> None:
        engine = ProgressionEngine(repository_checker=FakeRepositoryChecker(error=RepositoryLookupError("timeout")))
        with self.assertRaises(VerificationFailed):
            engine.verify_and_complete(chain_graph(), "A", "octo", "project")

    def test_unknown_node_is_checked_before_lookup(self) -> None:
        checker = FakeRepositoryChecker(exists=True)
        engine = ProgressionEngine(repository_checker=checker)
        with self.assertRaises(NodeNotFound):
            engine.verify_and_complete(chain_graph(), "Z", "octo", "project")
        self.assertEqual(checker.calls, [])


if __name__ == "__main__":
    unittest.main()
