"""Client-side script emitted by pages on normal (non-callback) requests.

The script defines a global namespace object (``AjaxInvocation`` by default)
holding a small XMLHttpRequest runtime plus one function per registered
handler. Calling that function posts back to the current page URL with the
dispatch token set to the handler name.

Client API:
    Single value:  ns.Name(value, onResponse)
    Form values:   ns.Name(form, onResponse, includeViewState)

    Without ``onResponse`` the call is synchronous and returns the response
    text. With it, the call is asynchronous and ``onResponse(responseText,
    responseXML)`` runs once the exchange completes.

Error Hooks:
    ns.OnInitFailure()                         no transport object available
    ns.OnAbort()                               status 0, exchange aborted
    ns.OnError(responseText, status, statusText)  any other non-200 status

    Each hook alerts the user; pages may assign their own functions.

Emission is a pure function of the config and the registry contents. Stubs
are sorted by handler name, so the same set of handlers always yields the
same script.
"""

import json
from string import Template
from typing import Iterable

from .capsules import HandlerDescriptor, HandlerKind
from .config import Config

_OPENING = '<script type="text/javascript">\n'

_RUNTIME = Template("""\
if (typeof ${ns} === 'undefined')
{
    var ${ns} = {};
    ${ns}.InternalAjaxInvocation = {
        // Mozilla, Opera, Safari, IE7+ and older IE through ActiveX
        CreateXmlHttpRequest: function()
        {
            var nXmlHttp = null;
            if (typeof XMLHttpRequest != 'undefined')
            {
                nXmlHttp = new XMLHttpRequest();
            }
            if (!nXmlHttp)
            {
                try
                {
                    nXmlHttp = new ActiveXObject("Msxml2.XMLHTTP");
                }
                catch (e)
                {
                    try
                    {
                        nXmlHttp = new ActiveXObject("Microsoft.XMLHTTP");
                    }
                    catch (e2)
                    {
                        nXmlHttp = null;
                    }
                }
            }
            return nXmlHttp;
        },
        // Reports a finished exchange; true if the response can be used
        CheckStatus: function(nXmlHttp)
        {
            if (nXmlHttp.status == 200)
            {
                return true;
            }
            if (nXmlHttp.status == 0)
            {
                ${ns}.OnAbort();
            }
            else
            {
                ${ns}.OnError(nXmlHttp.responseText, nXmlHttp.status, nXmlHttp.statusText);
            }
            return false;
        },
        InvokeCallBack: function(query, onResponse)
        {
            var nXmlHttp = this.CreateXmlHttpRequest();
            if (!nXmlHttp)
            {
                ${ns}.OnInitFailure();
                return null;
            }
            var nSelf = this;
            var nIsAsync = (onResponse != null);
            nXmlHttp.open('POST', document.URL, nIsAsync);
            nXmlHttp.setRequestHeader('Content-Type', 'application/x-www-form-urlencoded');
            if (nIsAsync)
            {
                nXmlHttp.onreadystatechange = function()
                {
                    if (nXmlHttp.readyState != 4)
                    {
                        return;
                    }
                    if (nSelf.CheckStatus(nXmlHttp))
                    {
                        onResponse(nXmlHttp.responseText, nXmlHttp.responseXML);
                    }
                };
            }
            nXmlHttp.send(query);
            if (!nIsAsync)
            {
                return nSelf.CheckStatus(nXmlHttp) ? nXmlHttp.responseText : null;
            }
            return null;
        }
    };
    ${ns}.OnInitFailure = function()
    {
        alert("Your Browser doesn't support AJAX! Please use a newer one.");
        return null;
    };
    ${ns}.OnAbort = function()
    {
        alert("An unexpected error occured while processing your request.\\nThe request has been aborted.");
        return null;
    };
    ${ns}.OnError = function(responseText, status, statusText)
    {
        alert("An unexpected error occured while processing your request.\\nCode: " + status + "\\nReason: " + statusText);
        return null;
    };
    // Callback for a single-value handler
    ${ns}.SummonServer = function(serverMethod, param, onResponse)
    {
        var nQuery = ${token} + '=' + encodeURIComponent(serverMethod);
        if (param != null)
        {
            nQuery += '&' + ${payload} + '=' + encodeURIComponent(param);
        }
        return this.InternalAjaxInvocation.InvokeCallBack(nQuery, onResponse);
    };
    // Callback for a form handler
    ${ns}.SummonSubmit = function(serverMethod, form, onResponse, includeViewState)
    {
        var nQuery = ${token} + '=' + encodeURIComponent(serverMethod);
        if (form)
        {
            for (var iElem = 0; iElem < form.elements.length; iElem++)
            {
                var nElem = form.elements[iElem];
                var nElemName = nElem.name;
                if (nElemName == null || nElemName == '') { nElemName = nElem.id; }
                if (nElemName == null || nElemName == '') { continue; }
                if (nElemName == ${view_state} && includeViewState !== true) { continue; }
                if (nElem.type == 'button' || nElem.type == 'submit' || nElem.type == 'reset') { continue; }
                if ((nElem.type == 'radio' || nElem.type == 'checkbox') && nElem.checked !== true) { continue; }
                nQuery += '&' + encodeURIComponent(nElemName) + '=' + encodeURIComponent(nElem.value);
            }
        }
        return this.InternalAjaxInvocation.InvokeCallBack(nQuery, onResponse);
    };
}""")

_SINGLE_VALUE_STUB = Template("""
// Remote method
${ns}.${name} = function(param, onResponse)
{
    return ${ns}.SummonServer(${literal}, param, onResponse);
};""")

_FORM_VALUES_STUB = Template("""
// Remote method
${ns}.${name} = function(form, onResponse, includeViewState)
{
    return ${ns}.SummonSubmit(${literal}, form, onResponse, includeViewState);
};""")

_STUBS = {
    HandlerKind.SINGLE_VALUE: _SINGLE_VALUE_STUB,
    HandlerKind.FORM_VALUES: _FORM_VALUES_STUB,
}

_CLOSING = "\n</script>"


def render_runtime(config: Config) -> str:
    """The fixed part of the script: transport, hooks and generic helpers."""
    return _RUNTIME.substitute(
        ns=config.client_namespace,
        token=json.dumps(config.dispatch_param),
        payload=json.dumps(config.payload_param),
        view_state=json.dumps(config.view_state_field),
    )


def render_stub(config: Config, descriptor: HandlerDescriptor) -> str:
    """The client function for one handler, shaped by the handler kind."""
    return _STUBS[descriptor.kind].substitute(
        ns=config.client_namespace,
        name=descriptor.name,
        literal=json.dumps(descriptor.name),
    )


def render_source(config: Config, descriptors: Iterable[HandlerDescriptor]) -> str:
    """The JavaScript for a set of handlers, without the enclosing tags."""
    parts = [render_runtime(config)]
    for descriptor in sorted(descriptors, key=lambda d: d.name):
        parts.append(render_stub(config, descriptor))
    return "".join(parts)


def render_script(config: Config, descriptors: Iterable[HandlerDescriptor]) -> str:
    """The complete ``<script>`` block for a set of handlers."""
    return _OPENING + render_source(config, descriptors) + _CLOSING
