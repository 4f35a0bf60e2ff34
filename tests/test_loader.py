import types

import pytest

from microbench.harness import (
    ConfigurationError,
    LoadError,
    ModuleConfig,
    SetupError,
    discover,
    load_source,
)


class TestModuleConfig:
    def test_mapping_access(self):
        config = ModuleConfig("m", {"iterations": 3})
        assert config["iterations"] == 3
        assert config.get("missing", 7) == 7
        assert dict(config) == {"iterations": 3}

    def test_require_missing_raises(self):
        config = ModuleConfig("m", {})
        with pytest.raises(ConfigurationError, match="iterations"):
            config.require("iterations")

    def test_overrides_do_not_mutate_original(self):
        config = ModuleConfig("m", {"iterations": 3, "size": 10})
        updated = config.with_overrides({"iterations": 1, "extra": True})
        assert updated["iterations"] == 1
        assert updated["extra"] is True
        assert config["iterations"] == 3
        assert "extra" not in config


class TestLoadSource:
    def test_load_file(self, write_module, valid_module_source):
        path = write_module("summing", valid_module_source)
        module = load_source(path)
        assert module.name == "summing"
        assert module.source == str(path)
        assert module.has_setup

    def test_load_file_from_string_path(self, write_module, valid_module_source):
        path = write_module("summing", valid_module_source)
        module = load_source(str(path))
        assert module.name == "summing"

    def test_load_dotted_name(self):
        module = load_source("microbench.benchmarks.fibonacci")
        assert module.name == "fibonacci"
        assert not module.has_setup

    def test_load_object(self, counting_module):
        module = load_source(counting_module(name="counter"))
        assert module.name == "counter"

    def test_missing_init_is_load_error(self, write_module):
        path = write_module("no_init", """
            def get_iterations(config):
                return 1

            def run(config, fixture):
                pass
        """)
        with pytest.raises(LoadError) as exc_info:
            load_source(path)
        assert exc_info.value.missing == ["init"]
        assert exc_info.value.source == str(path)

    def test_non_callable_entry_point_is_missing(self, write_module):
        path = write_module("bad_run", """
            run = 5

            def init():
                return {"iterations": 1}

            def get_iterations(config):
                return 1
        """)
        with pytest.raises(LoadError) as exc_info:
            load_source(path)
        assert exc_info.value.missing == ["run"]

    def test_setup_optional_unless_strict(self, write_module):
        path = write_module("no_setup", """
            def init():
                return {"iterations": 1}

            def get_iterations(config):
                return config["iterations"]

            def run(config, fixture):
                assert fixture is None
        """)
        module = load_source(path)
        assert not module.has_setup

        with pytest.raises(LoadError) as exc_info:
            load_source(path, strict=True)
        assert exc_info.value.missing == ["setup"]

    def test_syntax_error_is_load_error(self, write_module):
        path = write_module("broken", "def init(:\n")
        with pytest.raises(LoadError):
            load_source(path)

    def test_missing_file_is_load_error(self, tmp_path):
        with pytest.raises(LoadError, match="cannot load"):
            load_source(tmp_path / "nowhere.py")

    def test_unknown_dotted_name_is_load_error(self):
        with pytest.raises(LoadError):
            load_source("microbench.benchmarks.does_not_exist")

    def test_module_name_ignores_name_global(self):
        mod = types.ModuleType("bench_fib")
        mod.name = "some payload global"
        mod.init = lambda: {"iterations": 1}
        mod.get_iterations = lambda config: config["iterations"]
        mod.run = lambda config, fixture: None

        assert load_source(mod).name == "bench_fib"

    def test_sys_exit_during_import_is_load_error(self, write_module):
        path = write_module("exits", "import sys\nsys.exit(3)\n")
        with pytest.raises(LoadError, match="SystemExit"):
            load_source(path)


class TestDiscover:
    def test_keeps_order_and_skips_bad_sources(self, write_module, valid_module_source):
        first = write_module("first", valid_module_source)
        bad = write_module("bad", """
            def get_iterations(config):
                return 1

            def run(config, fixture):
                pass

            def setup(config):
                pass
        """)
        second = write_module("second", valid_module_source)

        suite, errors = discover([first, bad, second])

        assert [m.name for m in suite] == ["first", "second"]
        assert len(errors) == 1
        assert errors[0].source == str(bad)
        assert "init" in str(errors[0])

    def test_sys_exit_in_one_source_does_not_stop_discovery(self, write_module, valid_module_source):
        bad = write_module("exits", "import sys\nsys.exit(3)\n")
        good = write_module("good", valid_module_source)

        suite, errors = discover([bad, good])

        assert [m.name for m in suite] == ["good"]
        assert len(errors) == 1
        assert errors[0].source == str(bad)

    def test_empty_sources(self):
        suite, errors = discover([])
        assert suite == []
        assert errors == []


class TestBenchmarkModuleLifecycle:
    def test_iterations_before_init_raises(self, counting_module):
        module = load_source(counting_module())
        with pytest.raises(ConfigurationError, match="before init"):
            module.iterations()

    def test_iterations_after_init(self, counting_module):
        module = load_source(counting_module(iterations=4))
        module.init()
        assert module.iterations() == 4

    @pytest.mark.parametrize("value", [0, -2, True, 2.5, "3"])
    def test_invalid_iteration_values(self, counting_module, value):
        module = load_source(counting_module(iterations=value))
        module.init()
        with pytest.raises(ConfigurationError):
            module.iterations()

    def test_init_must_return_mapping(self, write_module):
        path = write_module("listy", """
            def init():
                return [1, 2]

            def get_iterations(config):
                return 1

            def run(config, fixture):
                pass
        """)
        module = load_source(path)
        with pytest.raises(ConfigurationError, match="mapping"):
            module.init()

    def test_init_failure_is_configuration_error(self, counting_module):
        module = load_source(counting_module(init_error=KeyError("size")))
        with pytest.raises(ConfigurationError) as exc_info:
            module.init()
        assert isinstance(exc_info.value.__cause__, KeyError)

    def test_setup_failure_is_setup_error(self, counting_module):
        module = load_source(counting_module(setup_error=MemoryError("too big")))
        module.init()
        with pytest.raises(SetupError, match="too big"):
            module.setup()

    def test_release_drops_state(self, counting_module):
        module = load_source(counting_module())
        module.init()
        module.setup()
        module.release()
        assert module.config is None
        assert module.fixture is None
