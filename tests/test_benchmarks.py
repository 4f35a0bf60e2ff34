import pytest

from microbench.benchmarks import bubble_sort, factorial, fibonacci, smoothing
from microbench.harness import discover
from microbench.scenarios import (
    BUNDLED_MODULES,
    CATEGORIES,
    bundled_sources,
    get_bundled_module,
    get_modules_by_category,
)


class TestPayloads:
    @pytest.mark.parametrize("n,expected", [(1, 1), (2, 1), (10, 55), (20, 6765)])
    def test_fib(self, n, expected):
        assert fibonacci.fib(n) == expected

    def test_factorial(self):
        assert factorial.factorial(0) == 1
        assert factorial.factorial(5) == 120

    def test_sort_in_place(self):
        array = bubble_sort.create(50, seed=3)
        expected = sorted(array)
        bubble_sort.sort(array)
        assert array == expected

    def test_smooth_constant_image_is_unchanged(self):
        image = [[0.5] * 5 for _ in range(4)]
        out = smoothing.smooth(image, radius=1)
        assert [v for row in out for v in row] == pytest.approx([0.5] * 20)

    def test_smooth_averages_neighbours(self):
        image = [[0.0, 0.0, 0.0], [0.0, 9.0, 0.0], [0.0, 0.0, 0.0]]
        out = smoothing.smooth(image, radius=1)
        assert out[1][1] == pytest.approx(1.0)
        assert out[0][0] == pytest.approx(9.0 / 4)

    def test_synthetic_image_is_deterministic(self):
        first = smoothing.synthetic_image(8, 4, seed=1)
        assert first == smoothing.synthetic_image(8, 4, seed=1)
        assert len(first) == 4 and len(first[0]) == 8


class TestBundledDefinitions:
    def test_categories(self):
        assert CATEGORIES == ["image", "numeric", "sorting"]
        assert [m.name for m in get_modules_by_category("numeric")] == ["fibonacci", "factorial"]

    def test_unknown_category(self):
        with pytest.raises(ValueError):
            get_modules_by_category("graphics")

    def test_get_bundled_module(self):
        assert get_bundled_module("smoothing").category == "image"
        with pytest.raises(ValueError):
            get_bundled_module("quicksort")

    def test_all_sources_load(self):
        suite, errors = discover(bundled_sources())
        assert errors == []
        assert [m.name for m in suite] == [m.name for m in BUNDLED_MODULES]


class TestBundledRuns:
    def test_every_bundled_module_completes(self, make_runner):
        suite, errors = discover(bundled_sources())
        result = make_runner(overrides={"iterations": 2}).run_suite(suite, errors)

        assert result.ok
        labels = {run.name: run.results[0].label for run in result.runs}
        assert labels == {
            "fibonacci": "fib()",
            "factorial": "factorial()",
            "smoothing": "smooth()",
            "bubble_sort": "sort()",
        }

    def test_declared_iterations(self, make_runner):
        suite, _ = discover(bundled_sources("sorting"))
        module = suite[0]
        module.init()
        assert module.iterations() == 30
