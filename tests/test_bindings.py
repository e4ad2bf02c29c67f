import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from modrt import GlobalBindings, ModuleRuntime  # noqa: E402


def test_global_definition_instantiates_once():
    runtime = ModuleRuntime()
    calls = []

    def jquery(require, exports, module, filename, dirname):
        calls.append(filename)
        module.exports = {"fn": "jquery"}

    runtime.define("/jquery$3.0.0/dist/jquery", jquery, globals=["$", "jQuery"])

    assert calls == ["/jquery$3.0.0/dist/jquery"]
    assert runtime.globals["$"] is runtime.globals["jQuery"]
    assert runtime.require("/jquery$3.0.0/dist/jquery") is runtime.globals["$"]
    assert calls == ["/jquery$3.0.0/dist/jquery"]
    assert "/jquery$3.0.0/dist/jquery" in runtime.bindings


def test_global_binding_converges_through_other_specifiers():
    runtime = ModuleRuntime()
    runtime.installed("app$1.0.0", "jquery", "3.0.0")
    runtime.main("/jquery$3.0.0", "dist/jquery")
    runtime.define("/jquery$3.0.0/dist/jquery", {"fn": "jquery"}, globals=["$"])

    def app(require, exports, module, filename, dirname):
        exports["jq"] = require("jquery")

    runtime.define("/app$1.0.0/index", app)

    assert runtime.require("/app$1.0.0/index")["jq"] is runtime.globals["$"]


def test_bound_module_is_returned_when_cache_entry_is_missing():
    runtime = ModuleRuntime()
    runtime.define("/lib/g", lambda r, e, m, f, d: e.update(g=True), globals=["G"])
    bound = runtime.bindings.lookup("/lib/g")

    # drop the instance-cache entry; the binding table still short-circuits
    del runtime.cache["/lib/g"]

    assert runtime.require_module("/lib/g") is bound
    assert "/lib/g" not in runtime.cache


def test_globals_write_into_supplied_namespace():
    namespace = {}
    runtime = ModuleRuntime(namespace)
    runtime.define("/lib/config", {"debug": False}, globals=["CONFIG"])

    assert namespace == {"CONFIG": {"debug": False}}


def test_unattached_bindings_refuse_to_bind():
    bindings = GlobalBindings()

    with pytest.raises(RuntimeError):
        bindings.bind("/lib/x", ["X"])
    assert bindings.lookup("/lib/x") is None
