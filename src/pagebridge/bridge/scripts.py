"""Page-side script sources for the response capture bridge."""

from __future__ import annotations

import json

# Installed into every new document. Placeholders are substituted by
# build_install_script(); everything lives under one window property.
_INSTALL_TEMPLATE = """(() => {
    const ns = window[__NAMESPACE__] || (window[__NAMESPACE__] = {});
    ns.responses = ns.responses || {};
    ns.accessors = ns.accessors || {};
    ns.prefix = __PREFIX__;
    ns.pathOf = function(url) {
        try {
            const u = new URL(String(url), window.location.href);
            if (u.origin !== window.location.origin) {
                return null;
            }
            return u.href.substr(u.origin.length);
        } catch (e) {
            return null;
        }
    };
    ns.getApiResponse = function(path) {
        return Object.prototype.hasOwnProperty.call(ns.responses, path) ? ns.responses[path] : null;
    };
    const install = () => {
        const proto = XMLHttpRequest.prototype;
        if (proto[__MARKER__]) {
            return;
        }
        Object.defineProperty(proto, __MARKER__, {value: true});
        const open = proto.open;
        const send = proto.send;
        proto.open = function(method, url, ...rest) {
            this[__URL_KEY__] = url;
            return open.call(this, method, url, ...rest);
        };
        proto.send = function(...args) {
            const path = ns.pathOf(this[__URL_KEY__]);
            if (path !== null && path.startsWith(ns.prefix)) {
                this.addEventListener('readystatechange', e => {
                    const xhr = e.target;
                    if (xhr.readyState !== XMLHttpRequest.DONE) {
                        return;
                    }
                    if (Object.prototype.hasOwnProperty.call(ns.responses, path)) {
                        return;
                    }
                    let text;
                    try {
                        text = xhr.responseText;
                    } catch (err) {
                        text = typeof xhr.response === 'string' ? xhr.response : JSON.stringify(xhr.response);
                    }
                    ns.responses[path] = [xhr.status, text];
                });
            }
            return send.apply(this, args);
        };
    };
    if (document.readyState === 'complete') {
        install();
    } else {
        window.addEventListener('load', install);
    }
__ACCESSORS__})()"""

_READ_TEMPLATE = """path => {
    const ns = window[__NAMESPACE__];
    return ns && ns.getApiResponse ? ns.getApiResponse(path) : null;
}"""

_RESET_TEMPLATE = """() => {
    const ns = window[__NAMESPACE__];
    if (ns) {
        ns.responses = {};
    }
}"""

_CALL_TEMPLATE = """([name, args]) => {
    const ns = window[__NAMESPACE__];
    if (!ns || typeof ns.accessors[name] !== 'function') {
        throw new Error('Accessor ' + name + ' is not installed');
    }
    return ns.accessors[name](...args);
}"""


def _substitute(template: str, namespace: str) -> str:
    return template.replace("__NAMESPACE__", json.dumps(namespace))


def build_install_script(namespace: str, api_prefix: str, accessors: dict[str, str]) -> str:
    """Render the capture installer with the given named accessors appended."""
    lines = "".join(
        f"    ns.accessors[{json.dumps(name)}] = ({source.strip()});\n"
        for name, source in accessors.items()
    )
    script = _substitute(_INSTALL_TEMPLATE, namespace)
    return (
        script.replace("__PREFIX__", json.dumps(api_prefix))
        .replace("__MARKER__", json.dumps(f"{namespace}Installed"))
        .replace("__URL_KEY__", json.dumps(f"{namespace}Url"))
        .replace("__ACCESSORS__", lines)
    )


def build_read_script(namespace: str) -> str:
    return _substitute(_READ_TEMPLATE, namespace)


def build_reset_script(namespace: str) -> str:
    return _substitute(_RESET_TEMPLATE, namespace)


def build_call_script(namespace: str) -> str:
    return _substitute(_CALL_TEMPLATE, namespace)
