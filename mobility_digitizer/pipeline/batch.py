# mobility_digitizer/pipeline/batch.py
from __future__ import annotations
from concurrent.futures import Executor, Future, ProcessPoolExecutor, ThreadPoolExecutor, as_completed, wait
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from loguru import logger

from mobility_digitizer.exceptions import MobilityError
from mobility_digitizer.ingest.acquire import acquire_report, pdf_path_for
from mobility_digitizer.pipeline.digitize import DigitizeSettings, digitize_geography
from mobility_digitizer.schema.serialization import (
    export_chart_csvs, geography_output_dir, load_prior_or_empty, write_result,
)
from mobility_digitizer.schema.types import ChartSeries, Geography, GeographyResult
from mobility_digitizer.series.merge import merge_results
from mobility_digitizer.utils.io import write_json
from mobility_digitizer.utils.logging import setup_logging
from mobility_digitizer.utils.timers import timer

FetchFn = Callable[[Geography], Path]
DigitizeFn = Callable[[str, str, DigitizeSettings], List[ChartSeries]]
ExecutorFactory = Callable[[int], Executor]

@dataclass
class StageSummary:
    stage: str
    attempted: int = 0
    succeeded: int = 0
    failed: int = 0
    failures: Dict[str, str] = field(default_factory=dict)

    def ok(self):
        self.succeeded += 1

    def fail(self, code: str, reason: str):
        self.failed += 1
        self.failures[code] = reason

    def log(self):
        logger.info(f"[{self.stage}] Total: {self.attempted} Succeeded: {self.succeeded} Failed: {self.failed}")

@dataclass
class BatchSummary:
    acquisition: StageSummary
    processing: StageSummary

    def to_dict(self) -> dict:
        return {"acquisition": asdict(self.acquisition), "processing": asdict(self.processing)}

def _describe(e: BaseException) -> str:
    if isinstance(e, MobilityError):
        return f"{e.error_code}: {e.message}"
    return f"{e.__class__.__name__}: {e}"

def _init_worker(level: str):
    setup_logging(level)

def _unique(geographies: Iterable[Geography]) -> List[Geography]:
    # one processing task per stored record
    seen, out = set(), []
    for g in geographies:
        ident = (g.parent, g.key)
        if ident in seen:
            logger.warning(f"[batch] Dropping duplicate geography {g.code}")
            continue
        seen.add(ident)
        out.append(g)
    return out

class BatchOrchestrator:
    """
    One batch run: a bounded acquisition stage, then a bounded processing stage.
    Pools live only inside acquire_all / process_all; nothing outlives the batch.
    """

    def __init__(self, cfg, settings: Optional[DigitizeSettings] = None, *,
                 fetch: Optional[FetchFn] = None,
                 digitize: Optional[DigitizeFn] = None,
                 acquire_executor: Optional[ExecutorFactory] = None,
                 process_executor: Optional[ExecutorFactory] = None):
        self.cfg = cfg
        self.settings = settings or DigitizeSettings.from_cfg(cfg)
        self.fetch = fetch or (lambda geo: acquire_report(geo, cfg))
        self.digitize = digitize or digitize_geography
        self.acquire_executor = acquire_executor or (lambda n: ThreadPoolExecutor(max_workers=n))
        self.process_executor = process_executor or (
            lambda n: ProcessPoolExecutor(max_workers=n, initializer=_init_worker,
                                          initargs=(self.settings.log_level,))
        )
        self.output_root = Path(cfg.paths.output)
        self.prefer = str(cfg.merge.prefer)

    # ---- acquisition ----
    def acquire_all(self, geographies: Iterable[Geography]) -> Tuple[List[Tuple[Geography, Path]], StageSummary]:
        geographies = _unique(geographies)
        summary = StageSummary(stage="acquire", attempted=len(geographies))
        fetched: List[Tuple[Geography, Path]] = []

        with self.acquire_executor(int(self.cfg.runtime.acquire_concurrency)) as pool:
            futures: Dict[Future, Geography] = {pool.submit(self.fetch, g): g for g in geographies}
            wait(futures)

        for fut, geo in futures.items():
            try:
                fetched.append((geo, Path(fut.result())))
                summary.ok()
            except Exception as e:
                logger.warning(f"[acquire] Failed to download for {geo.code}: {_describe(e)}")
                summary.fail(geo.code, _describe(e))

        # keep submission order; completion order is arbitrary
        order = {g.code: i for i, g in enumerate(geographies)}
        fetched.sort(key=lambda gp: order[gp[0].code])
        summary.log()
        return fetched, summary

    # ---- processing ----
    def persist(self, geo: Geography, charts: List[ChartSeries]) -> GeographyResult:
        """Merge a fresh extraction into the stored record and write json + csv."""
        out_dir = geography_output_dir(self.output_root, geo)
        fresh = GeographyResult.from_charts(geo.code, geo.category, charts)
        prior = load_prior_or_empty(out_dir, geo)
        merged = merge_results(prior, fresh, prefer=self.prefer)
        write_result(out_dir, merged)
        export_chart_csvs(out_dir, merged)
        logger.info(f"[persist] Wrote to file... {geo.code} → {out_dir}")
        return merged

    def process_all(self, fetched: Iterable[Tuple[Geography, Path]]) -> StageSummary:
        fetched = list(fetched)
        summary = StageSummary(stage="process", attempted=len(fetched))

        with self.process_executor(int(self.cfg.runtime.process_concurrency)) as pool:
            futures: Dict[Future, Geography] = {}
            for geo, pdf in fetched:
                out_dir = geography_output_dir(self.output_root, geo)
                logger.info(f"[process] Processing... {geo.code}")
                futures[pool.submit(self.digitize, str(pdf), str(out_dir), self.settings)] = geo

            # persisting happens here, in this process: the single writer per record
            for fut in as_completed(futures):
                geo = futures[fut]
                try:
                    self.persist(geo, fut.result())
                    summary.ok()
                except Exception as e:
                    logger.error(f"[process] {geo.code} failed: {_describe(e)}")
                    summary.fail(geo.code, _describe(e))

        summary.log()
        return summary

    # ---- whole batch ----
    def run(self, geographies: Iterable[Geography]) -> BatchSummary:
        geographies = list(geographies)
        with timer("acquire"):
            if bool(self.cfg.phases.acquire):
                fetched, acq = self.acquire_all(geographies)
            else:
                fetched, acq = self._already_fetched(geographies)
        if bool(self.cfg.phases.process):
            with timer("process"):
                proc = self.process_all(fetched)
        else:
            proc = StageSummary(stage="process")
        return BatchSummary(acquisition=acq, processing=proc)

    def _already_fetched(self, geographies: List[Geography]) -> Tuple[List[Tuple[Geography, Path]], StageSummary]:
        geographies = _unique(geographies)
        summary = StageSummary(stage="acquire", attempted=len(geographies))
        fetched = []
        for g in geographies:
            p = pdf_path_for(self.cfg.paths.pdfs, str(self.cfg.source.vintage), g, self.cfg.source.pdf_name)
            if p.exists():
                fetched.append((g, p))
                summary.ok()
            else:
                summary.fail(g.code, f"not on disk: {p}")
        summary.log()
        return fetched, summary

def write_summary(cfg, summary: BatchSummary) -> Path:
    out = Path(cfg.paths.runs) / str(cfg.source.vintage) / "summary.json"
    write_json(summary.to_dict(), out)
    return out
