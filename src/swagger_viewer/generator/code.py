"""Code generator — renders a client call stub for one endpoint."""

import json
import re

from swagger_viewer.parser.base import Endpoint, Param

SUPPORTED_LANGUAGES = ("javascript",)

# Names the generated function body already uses, plus JS reserved words.
_RESERVED = {
    "options", "query", "queryString", "url", "headers", "requestOptions", "response", "error",
    "break", "case", "catch", "class", "const", "continue", "debugger", "default", "delete",
    "do", "else", "enum", "export", "extends", "false", "finally", "for", "function", "if",
    "import", "in", "instanceof", "let", "new", "null", "return", "super", "switch", "this",
    "throw", "true", "try", "typeof", "var", "void", "while", "with", "yield", "await",
}

_INDENT = "    "


class CodeGenerator:
    """Generates client code that calls a single API endpoint."""

    def generate(self, endpoint: Endpoint, language: str = "javascript") -> str:
        """Return source text for a call to endpoint.

        Unsupported languages yield a placeholder comment rather than an error.
        """
        if (language or "javascript").lower() != "javascript":
            return f"// {language} code generation is not supported yet"
        return self._render_javascript(endpoint)

    def function_name(self, endpoint: Endpoint) -> str:
        """GET /users/{id} -> get_users_id"""
        name = re.sub(r"[^a-zA-Z0-9]+", "_", f"{endpoint.method.lower()}_{endpoint.path}").strip("_")
        if not name or name[0].isdigit():
            name = f"_{name}"
        return name

    def _render_javascript(self, endpoint: Endpoint) -> str:
        path_params = endpoint.params_in("path")
        query_params = endpoint.params_in("query")
        header_params = endpoint.params_in("header")
        body_params = endpoint.params_in("body")

        lines = [f"async function {self.function_name(endpoint)}(options = {{}}) {{"]

        locals_ = self._path_locals(path_params)
        for param in path_params:
            lines.append(f"{_INDENT}const {locals_[param.name]} = {self._option(param.name)};")

        if query_params:
            lines.append(f"{_INDENT}const query = new URLSearchParams();")
            for param in query_params:
                lines.append(
                    f"{_INDENT}if ({self._option(param.name)} !== undefined) "
                    f"query.append({json.dumps(param.name)}, {self._option(param.name)});"
                )
            lines.append(f"{_INDENT}const queryString = query.toString();")
            url_suffix = "${queryString ? '?' + queryString : ''}"
        else:
            url_suffix = ""
        lines.append(f"{_INDENT}const url = `{self._url_template(endpoint.path, locals_)}{url_suffix}`;")
        lines.append("")

        lines.extend([
            f"{_INDENT}const headers = {{",
            f"{_INDENT * 2}'Content-Type': 'application/json',",
            f"{_INDENT * 2}'Accept': 'application/json'",
            f"{_INDENT}}};",
        ])
        for param in header_params:
            lines.append(
                f"{_INDENT}if ({self._option(param.name)} !== undefined) "
                f"headers[{json.dumps(param.name)}] = {self._option(param.name)};"
            )
        lines.append("")

        body = self._body_expression(endpoint, body_params)
        lines.extend([
            f"{_INDENT}const requestOptions = {{",
            f"{_INDENT * 2}method: '{endpoint.method.upper()}',",
            f"{_INDENT * 2}headers" + ("," if body else ""),
        ])
        if body:
            lines.append(f"{_INDENT * 2}body: JSON.stringify({body})")
        lines.append(f"{_INDENT}}};")
        lines.append("")

        lines.extend([
            f"{_INDENT}try {{",
            f"{_INDENT * 2}const response = await fetch(url, requestOptions);",
            f"{_INDENT * 2}if (!response.ok) {{",
            f"{_INDENT * 3}throw new Error(`HTTP error! status: ${{response.status}}`);",
            f"{_INDENT * 2}}}",
            f"{_INDENT * 2}return await response.json();",
            f"{_INDENT}}} catch (error) {{",
            f"{_INDENT * 2}console.error('API call failed:', error);",
            f"{_INDENT * 2}throw error;",
            f"{_INDENT}}}",
            "}",
        ])
        return "\n".join(lines)

    def _option(self, name: str) -> str:
        return f"options[{json.dumps(name)}]"

    def _path_locals(self, params: list[Param]) -> dict[str, str]:
        """Map each path parameter to a safe, unique JS identifier."""
        taken = set(_RESERVED)
        result = {}
        for param in params:
            ident = re.sub(r"[^a-zA-Z0-9_$]", "_", param.name) or "_"
            if ident[0].isdigit():
                ident = f"_{ident}"
            while ident in taken:
                ident = f"{ident}_"
            taken.add(ident)
            result[param.name] = ident
        return result

    def _url_template(self, path: str, locals_: dict[str, str]) -> str:
        url = path.replace("`", "\\`")
        for name, ident in locals_.items():
            url = url.replace(f"{{{name}}}", f"${{{ident}}}")
        return url

    def _body_expression(self, endpoint: Endpoint, body_params: list[Param]) -> str | None:
        # Swagger 2 carries the body as an "in: body" parameter, OpenAPI 3 as requestBody
        if body_params:
            return self._option(body_params[0].name)
        if endpoint.request_body is not None:
            return 'options["body"]'
        return None
