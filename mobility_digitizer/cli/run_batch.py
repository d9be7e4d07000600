import typer
from pathlib import Path
from typing import List, Optional

from mobility_digitizer.config.loader import load_cfg
from mobility_digitizer.pipeline.batch import BatchOrchestrator, write_summary
from mobility_digitizer.pipeline.digitize import DigitizeSettings, digitize_page
from mobility_digitizer.resources import country_geographies, us_state_geographies
from mobility_digitizer.schema.types import CHART_TYPES
from mobility_digitizer.utils.io import clean_dir
from mobility_digitizer.utils.logging import setup_logging

app = typer.Typer()

def _batch_failed(cfg, summary) -> bool:
    """Nothing digitized although the process phase ran."""
    return bool(cfg.phases.process) and summary.processing.succeeded == 0

@app.command()
def run(
    countries: bool = typer.Option(True, help="Process country reports."),
    states: bool = typer.Option(True, help="Process US state reports."),
    only: Optional[List[str]] = typer.Option(None, "--only", help="Restrict to these fetch codes (repeatable)."),
    vintage: Optional[str] = typer.Option(None, help="Report vintage, e.g. 2020-04-11."),
    clean_pdfs: bool = typer.Option(False, help="Delete downloaded pdfs for the vintage first."),
):
    """Download, digitize and merge mobility reports for every configured geography."""
    cfg = load_cfg()
    if vintage:
        cfg.source.vintage = vintage
    log = setup_logging(cfg.logging.level)

    geographies = []
    if countries:
        geographies += country_geographies(cfg.root)
    if states:
        geographies += us_state_geographies(cfg.root)
    if only:
        wanted = set(only)
        geographies = [g for g in geographies if g.code in wanted]
    if not geographies:
        log.warning("[run] Nothing to do: no geographies selected")
        raise typer.Exit(code=1)

    if clean_pdfs:
        target = Path(cfg.paths.pdfs) / str(cfg.source.vintage)
        log.info(f"[run] Clearing folder... {target}")
        clean_dir(target)

    orchestrator = BatchOrchestrator(cfg)
    summary = orchestrator.run(geographies)
    out = write_summary(cfg, summary)
    log.info(f"[run] Summary → {out}")
    if _batch_failed(cfg, summary):
        raise typer.Exit(code=1)

@app.command()
def page(pdf: str, page: int = 1, out: str = "./output/_adhoc", vintage: Optional[str] = None):
    """Digitize a single page of a local report pdf (no merge, no persistence)."""
    cfg = load_cfg()
    log = setup_logging(cfg.logging.level)
    settings = DigitizeSettings.from_cfg(cfg, vintage)
    charts = digitize_page(pdf, page, out, settings)
    offset = 3 * (page - 1)
    for i, chart in enumerate(charts):
        name = CHART_TYPES[offset + i] if offset + i < len(CHART_TYPES) else f"chart-{offset + i}"
        latest = chart.points[0] if chart.points else None
        log.info(f"[page] {name}: {len(chart.points)} days, latest={latest.date if latest else None} "
                 f"value={latest.value if latest else None}")

if __name__ == "__main__":
    app()
