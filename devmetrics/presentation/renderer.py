import logging
import os
from jinja2 import Environment, FileSystemLoader, select_autoescape

from devmetrics.application.formatting import format_bytes, format_number
from devmetrics.domain.models import AnalysisState, AnalysisStatus

logger = logging.getLogger(__name__)

TEMPLATE_DIR = os.path.join(os.path.dirname(__file__), "templates")
TEMPLATE_NAME = "dashboard.html"


def _environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(TEMPLATE_DIR),
        autoescape=select_autoescape(["html"]),
    )
    env.filters["number"] = format_number
    env.filters["bytes"] = format_bytes
    return env


def render_dashboard(state: AnalysisState) -> str:
    """
    Renders the page for any analysis state. Every value coming from the API is
    escaped by the template engine.
    """
    template = _environment().get_template(TEMPLATE_NAME)
    return template.render(state=state, status=AnalysisStatus)


def write_dashboard(state: AnalysisState, output_path: str) -> str:
    html_content = render_dashboard(state)
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(html_content)
    logger.info(f"Dashboard written to {output_path}")
    return output_path
