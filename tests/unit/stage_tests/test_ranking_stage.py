"""
Tests for Stage 4: overall and per-branch rankings.
"""

from pipeline.step_4_ranking.ranking_logic import compute_totals, rank_by_branch, rank_overall


def _summary(entries):
    return [(e.position, e.emp_id, e.total) for e in entries]


class TestComputeTotals:

    def test_total_is_four_parts_plus_compre(self, student_factory):
        student = student_factory("A", quiz=1.0, mid_sem=2.0, lab_test=3.0, weekly_labs=4.0,
                                  pre_compre=100.0, compre=5.0, final_total=200.0)

        compute_totals([student])

        assert student.total == 15.0

    def test_recomputing_is_idempotent(self, student_factory):
        student = student_factory("A", quiz=0.1, mid_sem=0.2, compre=0.7)

        first = student.compute_total()
        for _ in range(5):
            compute_totals([student])

        assert student.total == first


class TestRankOverall:

    def test_top_three_descending(self, student_factory):
        students = [student_factory(f"E{i}", compre=float(i)) for i in range(6)]

        top = rank_overall(students)

        assert _summary(top) == [(1, "E5", 45.0), (2, "E4", 44.0), (3, "E3", 43.0)]

    def test_fewer_than_three_records(self, student_factory):
        top = rank_overall([student_factory("ONLY")])

        assert _summary(top) == [(1, "ONLY", 70.0)]

    def test_empty_list(self):
        assert rank_overall([]) == []

    def test_ties_broken_by_emp_id(self, student_factory):
        students = [
            student_factory("C"),
            student_factory("A"),
            student_factory("B"),
            student_factory("D"),
        ]

        top = rank_overall(students)

        assert [e.emp_id for e in top] == ["A", "B", "C"]

    def test_tie_break_stable_across_runs(self, student_factory):
        students = [student_factory(emp_id) for emp_id in ["Z9", "A1", "M5", "A1"]]

        runs = {tuple(e.emp_id for e in rank_overall(students)) for _ in range(10)}

        assert runs == {("A1", "A1", "M5")}

    def test_input_order_is_not_changed(self, student_factory):
        students = [student_factory(f"E{i}", compre=float(i)) for i in range(5)]

        rank_overall(students)

        assert [s.emp_id for s in students] == ["E0", "E1", "E2", "E3", "E4"]

    def test_custom_top_n(self, student_factory):
        students = [student_factory(f"E{i}", compre=float(i)) for i in range(6)]

        assert len(rank_overall(students, top_n=5)) == 5


class TestRankByBranch:

    def test_one_ranking_per_branch(self, student_factory):
        students = [
            student_factory("X1", branch="XX", compre=10.0),
            student_factory("Y1", branch="YY", compre=50.0),
            student_factory("X2", branch="XX", compre=30.0),
            student_factory("X3", branch="XX", compre=20.0),
            student_factory("X4", branch="XX", compre=40.0),
        ]

        rankings = rank_by_branch(students)

        assert list(rankings) == ["XX", "YY"]
        assert [e.emp_id for e in rankings["XX"]] == ["X4", "X2", "X3"]
        assert _summary(rankings["YY"]) == [(1, "Y1", 90.0)]

    def test_entries_carry_branch(self, student_factory):
        rankings = rank_by_branch([student_factory("A", branch="CS")])

        assert rankings["CS"][0].branch == "CS"

    def test_empty_list(self):
        assert rank_by_branch([]) == {}
