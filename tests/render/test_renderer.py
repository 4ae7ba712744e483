"""
Тесты рендерера: семантика каждой директивы.

Проверяет вывод атрибутов, включения, apply, условия, map, join и txt,
а также идемпотентность и параллельный рендеринг одного шаблона.
"""

from concurrent.futures import ThreadPoolExecutor

import pytest

from sgt import DataContext, DictLoader, RenderOptions, TemplateRenderer, compile, render, render_with_diagnostics
from sgt.template.nodes import CompiledTemplate, TemplateNode


class TestLiteralAndAttributes:

    @pytest.mark.parametrize("source", [
        "",
        "plain text",
        "multi\nline\ntext with { braces } and \\ backslash",
    ])
    def test_literal_only_renders_verbatim(self, source):
        assert render(compile(source), {"anything": 1}) == source

    def test_hello(self):
        assert render(compile("Hello $name$!"), {"name": "Filippo"}) == "Hello Filippo!"

    def test_nested_path(self):
        compiled = compile("$foo.bar.baz$")

        assert render(compiled, {"foo": {"bar": {"baz": "a string"}}}) == "a string"

    def test_missing_attribute_renders_empty(self):
        assert render(compile("[$foo.bar.baz$]"), {}, RenderOptions(quiet=True)) == "[]"

    def test_scalar_forms(self):
        compiled = compile("$n$|$f$|$none$|$flag$")

        assert render(compiled, {"n": 3, "f": 1.5, "none": None, "flag": False}) == "3|1.5||False"

    def test_callable_invoked_with_root(self):
        data = {"first": "Ada", "full": lambda root: root["first"] + "!"}

        assert render(compile("$full$"), data) == "Ada!"

    def test_data_context_accepted(self):
        ctx = DataContext({"a": "outer"}).push({"b": "inner"})

        assert render(compile("$a$/$b$"), ctx) == "outer/inner"

    def test_escaped_dollar(self):
        assert render(compile("Cost: \\$$price$"), {"price": 5}) == "Cost: $5"


class TestApply:

    def test_apply_callable(self):
        data = {"myFun": str.upper, "aVar": "abc"}

        assert render(compile("$apply myFun aVar$"), data) == "ABC"

    def test_apply_non_callable_emits_value(self):
        data = {"myFun": "X", "aVar": "abc"}

        assert render(compile("$apply myFun aVar$"), data) == "X"

    def test_apply_non_callable_does_not_resolve_argument(self):
        result = render_with_diagnostics(compile("$apply myFun missing$"), {"myFun": "X"})

        assert result.text == "X"
        assert result.diagnostics == []

    def test_apply_function_not_auto_invoked(self):
        """Функция в apply получает аргумент, а не корневое отображение."""
        calls = []

        def fn(value):
            calls.append(value)
            return f"<{value}>"

        assert render(compile("$apply fn x$"), {"fn": fn, "x": "v"}) == "<v>"
        assert calls == ["v"]

    def test_apply_argument_callable_is_invoked(self):
        data = {"fn": str.upper, "arg": lambda root: "lazy"}

        assert render(compile("$apply fn arg$"), data) == "LAZY"

    def test_apply_missing_argument(self):
        result = render_with_diagnostics(compile("$apply fn missing$"), {"fn": str.upper})

        assert result.text == ""
        assert len(result.diagnostics) == 1
        assert result.diagnostics[0].target == "missing"


class TestIf:
    TEMPLATE = "$if title$<h1>$title$</h1>$else$<h1>default</h1>$end if$"

    def test_truthy(self):
        assert render(compile(self.TEMPLATE), {"title": "T"}) == "<h1>T</h1>"

    def test_absent(self):
        assert render(compile(self.TEMPLATE), {}) == "<h1>default</h1>"

    def test_absent_condition_is_not_reported(self):
        assert render_with_diagnostics(compile(self.TEMPLATE), {}).diagnostics == []

    @pytest.mark.parametrize("value", ["", None, False, [], ()])
    def test_empty_values_are_falsy(self, value):
        assert render(compile(self.TEMPLATE), {"title": value}) == "<h1>default</h1>"

    @pytest.mark.parametrize("value", ["0", 0, [{"a": 1}], {}, {"a": 1}])
    def test_non_empty_values_are_truthy(self, value):
        assert render(compile("$if v$yes$else$no$end if$"), {"v": value}) == "yes"

    def test_without_else(self):
        assert render(compile("a$if x$b$end if$c"), {}) == "ac"

    def test_callable_condition(self):
        data = {"admin": lambda root: root["role"] == "admin", "role": "admin"}

        assert render(compile("$if admin$*$end if$"), data) == "*"

    def test_nested(self):
        compiled = compile("$if a$A$if b$B$else$b$end if$$else$-$end if$")

        assert render(compiled, {"a": 1, "b": 1}) == "AB"
        assert render(compiled, {"a": 1}) == "Ab"
        assert render(compiled, {}) == "-"


class TestMap:

    def test_inline_body(self):
        compiled = compile("$map:{<li>$username$</li>} names$")
        data = {"names": [{"username": "a"}, {"username": "b"}]}

        assert render(compiled, data) == "<li>a</li><li>b</li>"

    def test_empty_list(self):
        assert render(compile("$map:{<li>$username$</li>} names$"), {"names": []}) == ""

    def test_preserves_order(self):
        data = {"xs": [{"n": str(i)} for i in range(10)]}

        assert render(compile("$map:{$n$} xs$"), data) == "0123456789"

    def test_outer_attributes_visible(self):
        compiled = compile("$map:{$prefix$$name$;} users$")
        data = {"prefix": "@", "users": [{"name": "a"}, {"name": "b", "prefix": "#"}]}

        assert render(compiled, data) == "@a;#b;"

    def test_named_template_from_loader(self, loader):
        data = {"users": [{"username": "x"}, {"username": "y"}]}

        assert render(compile("$map li users$"), data, loader=loader) == "<li>x</li><li>y</li>"

    def test_named_template_bound_in_data(self):
        data = {"li": compile("[$v$]"), "xs": [{"v": 1}, {"v": 2}]}

        assert render(compile("$map li xs$"), data) == "[1][2]"

    def test_nested_map(self):
        compiled = compile("$map:{$name$($map:{$t$} tags$)} users$")
        data = {"users": [{"name": "a", "tags": [{"t": "x"}, {"t": "y"}]}, {"name": "b", "tags": []}]}

        assert render(compiled, data) == "a(xy)b()"

    def test_if_inside_map_body(self):
        compiled = compile("$map:{$if admin$*$end if$$name$ } users$")
        data = {"users": [{"name": "a", "admin": True}, {"name": "b"}]}

        assert render(compiled, data) == "*a b "

    def test_callable_list(self):
        data = {"users": lambda root: [{"name": "lazy"}]}

        assert render(compile("$map:{$name$} users$"), data) == "lazy"

    def test_tuple_is_a_list(self):
        assert render(compile("$map:{$n$} xs$"), {"xs": ({"n": 1}, {"n": 2})}) == "12"


class TestJoin:

    def test_join_scalars(self):
        compiled = compile("$join:{,} columns$")

        assert render(compiled, {"columns": ["c1", "c2", "c3"]}) == "c1,c2,c3"

    def test_empty_list(self):
        assert render(compile("$join:{,} columns$"), {"columns": []}) == ""

    def test_single_item(self):
        assert render(compile("$join:{, } columns$"), {"columns": ["only"]}) == "only"

    def test_single_field_records(self):
        data = {"columns": [{"name": "id"}, {"name": "title"}]}

        assert render(compile("$join:{, } columns$"), data) == "id, title"

    def test_record_scalar_fields_concatenated(self):
        data = {"rows": [{"a": "1", "b": "2", "nested": {"x": 1}}, {"a": "3"}]}

        assert render(compile("$join:{|} rows$"), data) == "12|3"

    def test_callable_items_invoked_with_root(self):
        data = {"sep": "-", "items": [lambda root: "a" + root["sep"], "b"]}

        assert render(compile("$join:{ } items$"), data) == "a- b"

    def test_multiline_separator(self):
        assert render(compile("$join:{\n} xs$"), {"xs": [1, 2]}) == "1\n2"


class TestTxt:

    def test_without_translator_emits_key(self):
        assert render(compile("$txt:{Hello World}$"), {}) == "Hello World"

    def test_translated(self, catalog):
        compiled = compile("$txt:{Hello World}$")

        assert render(compiled, {}, RenderOptions(locale="it"), translator=catalog) == "Ciao Mondo"

    def test_missing_translation_emits_key(self, catalog):
        compiled = compile("$txt:{Goodbye}$")

        assert render(compiled, {}, RenderOptions(locale="it"), translator=catalog) == "Goodbye"

    def test_empty_translation_emits_key(self, catalog):
        assert render(compile("$txt:{Empty}$"), {}, RenderOptions(locale="it"), translator=catalog) == "Empty"

    def test_default_locale(self, catalog):
        renderer = TemplateRenderer(translator=catalog, default_locale="it")

        assert renderer.render(compile("$txt:{Hello World}$"), {}).text == "Ciao Mondo"

    def test_regional_locale_falls_back(self, catalog):
        options = RenderOptions(locale="it_IT")

        assert render(compile("$txt:{Hello World}$"), {}, options, translator=catalog) == "Ciao Mondo"

    def test_domain_selection(self, catalog):
        compiled = compile("$txt:{Not found}$")

        assert render(compiled, {}, RenderOptions(locale="it"), translator=catalog) == "Not found"
        assert render(compiled, {}, RenderOptions(locale="it", domain="errors"), translator=catalog) == "Non trovato"

    def test_never_reports(self):
        assert render_with_diagnostics(compile("$txt:{X}$"), {}).diagnostics == []


class TestInclude:

    def test_include_from_loader_sees_same_context(self, loader):
        compiled = compile("$include header$body")

        assert render(compiled, {"title": "T"}, loader=loader) == "<h1>T</h1>body"

    def test_include_inside_map_sees_element(self, loader):
        compiled = compile("$map:{$include li$} users$")

        assert render(compiled, {"users": [{"username": "u"}]}, loader=loader) == "<li>u</li>"

    def test_include_bound_source_string(self):
        assert render(compile("$include part$"), {"part": "[$x$]", "x": 1}) == "[1]"

    def test_loader_takes_precedence_over_data(self, loader):
        compiled = compile("$include header$")

        assert render(compiled, {"header": "from data", "title": "T"}, loader=loader) == "<h1>T</h1>"

    def test_falls_back_to_data_when_loader_misses(self, loader):
        assert render(compile("$include extra$"), {"extra": compile("E")}, loader=loader) == "E"


class TestRenderProperties:

    def test_idempotent(self, loader):
        compiled = compile("$include header$$map:{$username$,} users$$txt:{Hi}$$missing$")
        data = {"title": "T", "users": [{"username": "a"}, {"username": "b"}]}

        first = render_with_diagnostics(compiled, data, loader=loader)
        second = render_with_diagnostics(compiled, data, loader=loader)

        assert first.text == second.text
        assert first.diagnostics == second.diagnostics

    def test_concurrent_renders_do_not_interfere(self):
        compiled = compile("$if vip$*$end if$$name$:$join:{,} tags$|$map:{$n$} rows$")
        renderer = TemplateRenderer()

        def job(i: int) -> str:
            data = {
                "name": f"user{i}",
                "vip": i % 2 == 0,
                "tags": [str(i), str(i * 2)],
                "rows": [{"n": i}, {"n": i + 1}],
            }
            return renderer.render(compiled, data).text

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(job, range(200)))

        for i, text in enumerate(results):
            star = "*" if i % 2 == 0 else ""
            assert text == f"{star}user{i}:{i},{i * 2}|{i}{i + 1}"

    def test_data_not_mutated(self):
        data = {"users": [{"name": "a"}], "title": "t"}
        snapshot = {"users": [{"name": "a"}], "title": "t"}

        render(compile("$map:{$name$$title$} users$"), data)

        assert data == snapshot

    def test_unknown_node_type(self):
        class Strange(TemplateNode):
            pass

        with pytest.raises(TypeError, match="No renderer for node type"):
            TemplateRenderer().render(CompiledTemplate(nodes=(Strange(),)), {})

    def test_callable_errors_propagate(self):
        def boom(root):
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            render(compile("$x$"), {"x": boom})

    def test_dict_loader_can_be_shared(self):
        loader = DictLoader({"a": "A$include b$", "b": "B"})

        assert render(compile("$include a$"), {}, loader=loader) == "AB"
