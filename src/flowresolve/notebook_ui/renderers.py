# src/flowresolve/notebook_ui/renderers.py
"""
Renderização de planos resolvidos e erros do resolver.

Duas saídas por chamada:
- `html` para notebooks (tabela de jobs / card de erro)
- `text` para terminais (sempre preenchido)

Os renderizadores não alteram a entrada e não importam o core: planos e
erros são aceitos como objetos com `to_dict()` / `to_payload()` ou já como
dict.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional
import html


@dataclass(frozen=True)
class RenderResult:
    """Resultado de renderização (apenas apresentação)."""
    html: Optional[str]
    text: str


PLAN_COLUMNS = ("#", "job", "uses", "depends_on", "inputs", "outputs")


def _escape(s: Any) -> str:
    return html.escape("" if s is None else str(s))


def _as_dict(obj: Any) -> Any:
    to_dict = getattr(obj, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    return obj


def _describe_input(item: Mapping[str, Any]) -> str:
    if item.get("source") == "dataset":
        return f"{item.get('name')} <- {item.get('id')}@{item.get('version')}"
    return f"{item.get('name')} <- {item.get('job')}.outputs.{item.get('output')}"


def _plan_rows(plan: Mapping[str, Any]) -> List[Dict[str, Any]]:
    rows = []
    for position, job in enumerate(plan.get("jobs", []) or [], start=1):
        rows.append(
            {
                "#": position,
                "job": job.get("id"),
                "uses": job.get("uses") or "",
                "depends_on": ", ".join(job.get("depends_on", []) or []),
                "inputs": "; ".join(_describe_input(i) for i in job.get("inputs", []) or []),
                "outputs": ", ".join(
                    f"{o.get('name')}:{o.get('type')}" for o in job.get("outputs", []) or []
                ),
            }
        )
    return rows


def _fields_html(fields: Mapping[str, Any]) -> str:
    cells = "".join(
        f"<tr><td><code>{_escape(k)}</code></td><td>{_escape(v)}</td></tr>"
        for k, v in fields.items()
    )
    return f"<table><tbody>{cells}</tbody></table>"


def _jobs_html(rows: List[Dict[str, Any]]) -> str:
    if not rows:
        return "<div><em>(no jobs)</em></div>"
    head = "".join(f"<th>{_escape(c)}</th>" for c in PLAN_COLUMNS)
    body = "".join(
        "<tr>" + "".join(f"<td>{_escape(row[c])}</td>" for c in PLAN_COLUMNS) + "</tr>"
        for row in rows
    )
    return f"<table><thead><tr>{head}</tr></thead><tbody>{body}</tbody></table>"


def _card_html(title: str, subtitle: Optional[str], body: str) -> str:
    sub = f"<div style='opacity:0.75'>{_escape(subtitle)}</div>" if subtitle else ""
    return (
        "<div style='border:1px solid #ddd; border-radius:12px; padding:12px; margin:8px 0;'>"
        f"<h3 style='margin:0 0 6px 0;'>{_escape(title)}</h3>"
        f"{sub}{body}"
        "</div>"
    )


def render_plan(plan: Any) -> RenderResult:
    """
    Renderiza um ResolvedPlan (ou seu `to_dict()`) em ordem de execução,
    com os hashes de entrada no cabeçalho.
    """
    data = _as_dict(plan)
    if not isinstance(data, Mapping):
        return RenderResult(html=None, text=repr(data))

    rows = _plan_rows(data)
    header = {
        "document_hash": data.get("document_hash"),
        "config_hash": data.get("config_hash"),
        "order": " -> ".join(data.get("order", []) or []),
    }
    workflow_inputs = [_describe_input(i) for i in data.get("inputs", []) or []]
    if workflow_inputs:
        header["inputs"] = "; ".join(workflow_inputs)

    html_out = _card_html("Resolved plan", f"{len(rows)} jobs", _fields_html(header)) + _jobs_html(rows)

    lines = [f"Resolved plan ({len(rows)} jobs)"]
    if workflow_inputs:
        lines.append(f"  workflow inputs: {header['inputs']}")
    for row in rows:
        line = f"  {row['#']}. {row['job']}"
        if row["uses"]:
            line += f" [{row['uses']}]"
        if row["depends_on"]:
            line += f" after {row['depends_on']}"
        lines.append(line)
        if row["inputs"]:
            lines.append(f"       inputs: {row['inputs']}")

    return RenderResult(html=html_out, text="\n".join(lines))


def render_error(error: Any) -> RenderResult:
    """
    Renderiza um payload de erro (`ResolverErrorPayload`, seu dict, ou uma
    exceção com `to_payload()`).
    """
    to_payload = getattr(error, "to_payload", None)
    if callable(to_payload):
        error = to_payload()
    data = _as_dict(error)
    if not isinstance(data, Mapping):
        return RenderResult(html=None, text=repr(data))

    details = dict(data.get("details", {}) or {})
    error_type = str(data.get("type", "ERROR"))
    message = str(data.get("message", ""))
    hint = data.get("hint")

    body = _fields_html(details)
    if hint:
        body += f"<div><em>{_escape(hint)}</em></div>"
    html_out = _card_html(error_type, message, body)

    lines = [f"{error_type}: {message}"]
    if details.get("path"):
        lines.append(f"  at: {details['path']}")
    if hint:
        lines.append(f"  hint: {hint}")

    return RenderResult(html=html_out, text="\n".join(lines))
