"""Tests for the generated client script."""
from __future__ import annotations

from ajax_invocation import AjaxInvocation, Config, HandlerDescriptor, HandlerKind, HandlerRegistry
from ajax_invocation.client_script import render_runtime, render_script, render_source, render_stub


def _registry(*entries: tuple[str, HandlerKind]) -> HandlerRegistry:
    registry = HandlerRegistry()
    for name, kind in entries:
        registry.register(HandlerDescriptor(name=name, kind=kind, callback=lambda _v: ""))
    return registry


class TestScriptBlock:
    """Tests for the overall script block."""

    def test_wrapped_in_script_tag(self, config):
        """The output is exactly one script element around the source."""
        script = render_script(config, [])
        assert script.startswith('<script type="text/javascript">\n')
        assert script.endswith("\n</script>")
        assert script.count("<script") == 1
        assert "<script" not in render_source(config, [])

    def test_runtime_defines_helpers_and_hooks(self, config):
        """Transport, both summon helpers and the three error hooks exist."""
        runtime = render_runtime(config)
        for member in (
            "AjaxInvocation.InternalAjaxInvocation",
            "CreateXmlHttpRequest",
            "InvokeCallBack",
            "AjaxInvocation.OnInitFailure = function()",
            "AjaxInvocation.OnAbort = function()",
            "AjaxInvocation.OnError = function(responseText, status, statusText)",
            "AjaxInvocation.SummonServer = function(serverMethod, param, onResponse)",
            "AjaxInvocation.SummonSubmit = function(serverMethod, form, onResponse, includeViewState)",
        ):
            assert member in runtime

    def test_transport_posts_to_current_page(self, config):
        """Callbacks POST url-encoded bodies to document.URL."""
        runtime = render_runtime(config)
        assert "nXmlHttp.open('POST', document.URL, nIsAsync);" in runtime
        assert "'Content-Type', 'application/x-www-form-urlencoded'" in runtime
        assert "var nIsAsync = (onResponse != null);" in runtime

    def test_status_categories(self, config):
        """200 succeeds, 0 is an abort, anything else an error."""
        runtime = render_runtime(config)
        assert "if (nXmlHttp.status == 200)" in runtime
        assert "if (nXmlHttp.status == 0)" in runtime
        assert "AjaxInvocation.OnAbort();" in runtime
        assert "AjaxInvocation.OnError(nXmlHttp.responseText, nXmlHttp.status, nXmlHttp.statusText);" in runtime
        assert "AjaxInvocation.OnInitFailure();" in runtime

    def test_async_handler_gets_text_and_xml(self, config):
        """Asynchronous callers receive responseText and responseXML."""
        assert "onResponse(nXmlHttp.responseText, nXmlHttp.responseXML);" in render_runtime(config)

    def test_wire_names(self, config):
        """Default wire parameter names are used in the queries."""
        runtime = render_runtime(config)
        assert "var nQuery = \"AjaxXmlHttp\" + '=' + encodeURIComponent(serverMethod);" in runtime
        assert "nQuery += '&' + \"AjaxParam\" + '=' + encodeURIComponent(param);" in runtime

    def test_custom_names(self):
        """Namespace and parameter names follow the config."""
        config = Config(
            client_namespace="Bridge",
            dispatch_param="Call",
            payload_param="Value",
            view_state_field="__STATE",
        )
        script = render_script(config, _registry(("Echo", HandlerKind.SINGLE_VALUE)))
        assert "if (typeof Bridge === 'undefined')" in script
        assert "Bridge.Echo = function(param, onResponse)" in script
        assert '"Call"' in script
        assert '"Value"' in script
        assert '"__STATE"' in script
        assert "AjaxInvocation" not in script.replace("InternalAjaxInvocation", "")


class TestFormSerialisation:
    """Tests for the form field filter in SummonSubmit."""

    def test_view_state_skipped_unless_requested(self, config):
        """The view-state field is only sent with includeViewState === true."""
        runtime = render_runtime(config)
        assert 'if (nElemName == "__VIEWSTATE" && includeViewState !== true) { continue; }' in runtime

    def test_unchecked_checkables_skipped(self, config):
        """Radio buttons and checkboxes are only sent when checked."""
        runtime = render_runtime(config)
        assert (
            "if ((nElem.type == 'radio' || nElem.type == 'checkbox') && nElem.checked !== true) { continue; }"
            in runtime
        )

    def test_buttons_skipped(self, config):
        """Buttons never become form values."""
        runtime = render_runtime(config)
        assert "if (nElem.type == 'button' || nElem.type == 'submit' || nElem.type == 'reset') { continue; }" in runtime

    def test_field_name_falls_back_to_id(self, config):
        """Unnamed elements are sent under their id."""
        assert "nElemName = nElem.id;" in render_runtime(config)

    def test_fields_are_encoded(self, config):
        """Names and values are URL-encoded."""
        assert (
            "nQuery += '&' + encodeURIComponent(nElemName) + '=' + encodeURIComponent(nElem.value);"
            in render_runtime(config)
        )


class TestStubs:
    """Tests for the per-handler client functions."""

    def test_single_value_stub(self, config):
        """Single-value handlers forward to SummonServer."""
        stub = render_stub(
            config, HandlerDescriptor(name="Echo", kind=HandlerKind.SINGLE_VALUE, callback=str)
        )
        assert "AjaxInvocation.Echo = function(param, onResponse)" in stub
        assert 'return AjaxInvocation.SummonServer("Echo", param, onResponse);' in stub

    def test_form_values_stub(self, config):
        """Form handlers forward to SummonSubmit with includeViewState."""
        stub = render_stub(
            config, HandlerDescriptor(name="SumForm", kind=HandlerKind.FORM_VALUES, callback=str)
        )
        assert "AjaxInvocation.SumForm = function(form, onResponse, includeViewState)" in stub
        assert 'return AjaxInvocation.SummonSubmit("SumForm", form, onResponse, includeViewState);' in stub

    def test_one_stub_per_handler(self, config):
        """Every registered handler gets exactly one stub."""
        script = render_script(
            config,
            _registry(("Echo", HandlerKind.SINGLE_VALUE), ("SumForm", HandlerKind.FORM_VALUES)),
        )
        assert script.count("// Remote method") == 2
        assert script.count("AjaxInvocation.Echo = ") == 1
        assert script.count("AjaxInvocation.SumForm = ") == 1

    def test_empty_registry_has_runtime_only(self, config):
        """Without handlers only the runtime is emitted."""
        script = render_script(config, [])
        assert "// Remote method" not in script
        assert script == '<script type="text/javascript">\n' + render_runtime(config) + "\n</script>"
        assert render_source(config, []) == render_runtime(config)


class TestDeterminism:
    """Tests for deterministic emission."""

    def test_same_handlers_same_script(self, config):
        """Registration order does not change the script."""
        entries = [
            ("Echo", HandlerKind.SINGLE_VALUE),
            ("SumForm", HandlerKind.FORM_VALUES),
            ("Alpha", HandlerKind.SINGLE_VALUE),
        ]
        forward = render_script(config, _registry(*entries))
        backward = render_script(config, _registry(*reversed(entries)))
        assert forward == backward

    def test_stubs_sorted_by_name(self, config):
        """Stubs appear in name order."""
        script = render_script(
            config,
            _registry(("Zeta", HandlerKind.SINGLE_VALUE), ("Alpha", HandlerKind.FORM_VALUES)),
        )
        assert script.index("AjaxInvocation.Alpha = ") < script.index("AjaxInvocation.Zeta = ")

    def test_kind_changes_script(self, config):
        """Same names with a different kind produce a different script."""
        single = render_script(config, _registry(("Echo", HandlerKind.SINGLE_VALUE)))
        form = render_script(config, _registry(("Echo", HandlerKind.FORM_VALUES)))
        assert single != form

    def test_control_script_matches_registry(self, config):
        """AjaxInvocation.client_script renders its own registry."""
        registry = _registry(("Echo", HandlerKind.SINGLE_VALUE))
        assert AjaxInvocation(config, registry).client_script() == render_script(config, registry)
