"""The demo page and its application."""
from typing import Optional

from starlette.applications import Starlette

from ..config import Config
from ..page import Page, create_app
from .handlers import SumFormParams, echo, field_count, sum_form

_BODY = """<h1>AJAX invocation demo</h1>
<p>
  <input id="echo-input" type="text" value="hello">
  <button type="button" onclick="{ns}.Echo(document.getElementById('echo-input').value, function (text) {{ document.getElementById('echo-output').textContent = text; }})">Echo</button>
  <span id="echo-output"></span>
</p>
<form id="sum-form" onsubmit="return false;">
  <input type="hidden" name="{view_state}" value="demo">
  <input name="a" type="text" value="2"> + <input name="b" type="text" value="3">
  <button type="button" onclick="document.getElementById('sum-output').textContent = {ns}.SumForm(this.form)">=</button>
  <span id="sum-output"></span>
</form>
"""


class DemoPage(Page):
    """Registers ``Echo``, ``SumForm`` and ``FieldCount``."""

    title = "AJAX invocation demo"

    def setup(self) -> None:
        self.ajax.invocation("Echo", echo, description="Return the payload unchanged")
        self.ajax.submission("SumForm", sum_form, model=SumFormParams, description="Add a and b")
        self.ajax.submission("FieldCount", field_count, description="List submitted field names")

    def render_body(self) -> str:
        config = self.ajax.config
        return _BODY.format(ns=config.client_namespace, view_state=config.view_state_field)


def create_demo_app(config: Optional[Config] = None, debug: bool = False) -> Starlette:
    return create_app({"/": DemoPage}, config, debug=debug)
