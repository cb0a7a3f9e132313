"""CLI interface for corpus TF-IDF analysis and PDF section extraction."""

import argparse
import logging
import math
import sys
import time
from pathlib import Path
from typing import Dict, Optional

from ..analysis.corpus import Corpus
from ..analysis.tfidf import compute_tfidf, rank_terms, top_terms
from ..batch.runner import build_corpus, build_section_corpus
from ..config import get_app_name, get_app_version, get_default_output_dir, get_log_level
from ..config.profile_loader import ProfileConfig, list_available_profiles, load_profile
from ..export.tfidf_export import export_tfidf, export_top_terms
from ..fetch.fetcher import DocumentFetcher
from ..pipeline.heading_segmentation import SegmenterConfig
from ..pipeline.reader import PDFReadError
from ..pipeline.tokenizer import title_words
from ..run_summary import RunSummary

logger = logging.getLogger(__name__)


class AnalysisError(Exception):
    """Raised when an analysis run cannot produce any result."""
    pass


def select_subset(corpus: Corpus, profile: ProfileConfig, subset: Optional[str]) -> Corpus:
    """Restrict corpus to a named profile subset, or to a category of that name.

    Args:
        corpus: Full corpus
        profile: Profile with optional 'subsets' definitions
        subset: Subset name; None returns the corpus unchanged

    Raises:
        AnalysisError: If the subset selects no documents
    """
    if subset is None:
        return corpus

    definition = profile.subsets.get(subset)
    if definition is None:
        selected = corpus.subset(category=subset)
    else:
        doc_ids = definition.get("doc_ids")
        doc_ids = [d for d in doc_ids if d in corpus.doc_ids] if doc_ids is not None else None
        selected = corpus.subset(doc_ids=doc_ids, category=definition.get("category"))

    if len(selected) == 0:
        raise AnalysisError(f"Subset {subset!r} selects no documents")
    return selected


def _write_outputs(corpus: Corpus, out_dir: Path, top_n: int, summary: RunSummary) -> Dict:
    start = time.time()
    tfidf = compute_tfidf(corpus.count_words())
    summary.durations["tfidf"] = time.time() - start
    summary.token_count = len(corpus.tokens)
    summary.vocabulary_size = int(tfidf["word"].nunique())

    ranked = rank_terms(tfidf)
    top = top_terms(tfidf, n=top_n)
    summary.tfidf_path = export_tfidf(ranked, out_dir / "tfidf.csv")
    summary.top_terms_path = export_top_terms(top, out_dir / "top_terms.xlsx", corpus.categories)
    return {"tfidf": ranked, "top_terms": top}


def run_profile_analysis(
    profile: ProfileConfig,
    output_dir: str,
    subset: Optional[str] = None,
    exclude_title_words: bool = False,
    top_n: Optional[int] = None,
    stem: Optional[bool] = None,
    fetcher: Optional[DocumentFetcher] = None,
) -> Dict:
    """Fetch a profile's documents, compute TF-IDF and export the tables.

    Args:
        profile: Loaded profile
        output_dir: Base output directory
        subset: Optional subset name (profile subset or category)
        exclude_title_words: Remove words occurring in document names
        top_n: Terms per document in the top-terms export (default: profile.top_n)
        stem: Override profile.stem
        fetcher: Optional DocumentFetcher (built from profile.fetch if omitted)

    Returns:
        Dict with summary (RunSummary), batch (build_corpus result), tfidf, top_terms

    Raises:
        AnalysisError: If no document could be fetched
    """
    stem = profile.stem if stem is None else stem
    top_n = top_n or profile.top_n

    summary = RunSummary.create(profile.name, output_dir)
    summary.subset = subset
    run_dir = Path(output_dir) / profile.name / summary.run_id[:8]
    run_dir.mkdir(parents=True, exist_ok=True)

    if fetcher is None:
        fetch_cfg = profile.fetch
        fetcher = DocumentFetcher(
            delay_seconds=fetch_cfg.get("delay_seconds"),
            retries=fetch_cfg.get("retries"),
            timeout=fetch_cfg.get("timeout"),
        )

    try:
        start = time.time()
        batch = build_corpus(profile.documents, fetcher, stem=stem, base_url=profile.base_url)
        summary.durations["fetch"] = time.time() - start
        summary.record_batch(batch)

        if batch["ok"] == 0:
            raise AnalysisError(f"No documents could be fetched for profile {profile.name!r}")

        corpus = select_subset(batch["corpus"], profile, subset)
        if exclude_title_words:
            corpus = corpus.without_words(title_words(corpus.doc_ids, stem=stem))

        tables = _write_outputs(corpus, run_dir, top_n, summary)
        summary.complete()
    except Exception:
        summary.complete("FAILED")
        raise
    finally:
        summary.save(run_dir / "run_summary.json")

    return {"summary": summary, "batch": batch, **tables}


def run_section_analysis(
    pdf_path: str,
    config: SegmenterConfig,
    output_dir: str,
    top_n: int = 10,
    stem: bool = True,
) -> Dict:
    """Segment a PDF into sections and compute TF-IDF across them.

    Returns:
        Dict with summary (RunSummary), corpus, tfidf, top_terms
    """
    summary = RunSummary.create(f"sections:{Path(pdf_path).stem}", output_dir)
    run_dir = Path(output_dir) / "sections" / Path(pdf_path).stem
    run_dir.mkdir(parents=True, exist_ok=True)

    try:
        start = time.time()
        corpus = build_section_corpus(pdf_path, config, stem=stem)
        summary.durations["segment"] = time.time() - start
        summary.total_sources = 1
        summary.ok_count = len(corpus)
        if len(corpus) == 0:
            raise AnalysisError(
                f"No sections found in {pdf_path} (no words of height {config.heading_size})"
            )
        tables = _write_outputs(corpus, run_dir, top_n, summary)
        summary.complete()
    except Exception:
        summary.complete("FAILED")
        raise
    finally:
        summary.save(run_dir / "run_summary.json")

    return {"summary": summary, "corpus": corpus, **tables}


def _optional_page(value) -> Optional[int]:
    """Profile page limits may be .inf in YAML, meaning unbounded."""
    if value is None or (isinstance(value, float) and math.isinf(value)):
        return None
    return int(value)


def _print_top(top, limit_docs: int = 20) -> None:
    for i, (doc_id, frame) in enumerate(top.groupby("doc_id", sort=False)):
        if i >= limit_docs:
            print("  ...")
            break
        words = ", ".join(f"{w} ({s:.4f})" for w, s in zip(frame["word"], frame["tf_idf"]))
        print(f"  {doc_id}: {words}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="corpus-explorer",
        description=f"{get_app_name()} - TF-IDF analysis of scraped documents and PDF sections"
    )

    parser.add_argument(
        "--profile",
        type=str,
        default="default",
        help=f"Profile name or YAML path (available: {', '.join(list_available_profiles())})"
    )

    parser.add_argument(
        "--output",
        required=False,
        help="Output directory (default: ./out or CORPUS_EXPLORER_OUTPUT_DIR)"
    )

    parser.add_argument(
        "--subset",
        type=str,
        help="Compute TF-IDF over a named profile subset or a single category"
    )

    parser.add_argument(
        "--exclude-title-words",
        action="store_true",
        help="Remove words that occur in document names before scoring"
    )

    parser.add_argument(
        "--top",
        type=int,
        help="Number of top terms per document (default: profile top_n)"
    )

    parser.add_argument(
        "--no-stem",
        action="store_true",
        help="Disable stemming"
    )

    parser.add_argument(
        "--sections",
        metavar="PDF",
        help="Segment a local PDF into heading sections instead of running the profile"
    )

    parser.add_argument(
        "--heading-size",
        type=int,
        help="Word height that marks headings (required with --sections unless set in profile)"
    )

    parser.add_argument(
        "--last-page",
        type=int,
        help="Ignore body text after this page (with --sections)"
    )

    parser.add_argument(
        "--max-line-gap",
        type=int,
        help="Largest line gap merged into one heading (default: 1)"
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose output"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {get_app_version()}"
    )
    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else get_log_level(),
        format="%(levelname)s %(name)s: %(message)s"
    )

    output_dir = args.output
    if not output_dir:
        output_dir = str(get_default_output_dir())
        print(f"Using default output directory: {output_dir}")

    try:
        profile = load_profile(args.profile)
        stem = False if args.no_stem else None

        if args.sections:
            seg = profile.segmenter
            heading_size = args.heading_size or seg.get("heading_size")
            if heading_size is None:
                parser.error("--heading-size is required with --sections (or set segmenter.heading_size in the profile)")
            config = SegmenterConfig(
                heading_size=int(heading_size),
                last_page=args.last_page or _optional_page(seg.get("last_page")),
                max_line_gap=args.max_line_gap if args.max_line_gap is not None else seg.get("max_line_gap", 1),
            )
            result = run_section_analysis(
                args.sections,
                config,
                output_dir,
                top_n=args.top or profile.top_n,
                stem=profile.stem if stem is None else stem,
            )
            summary = result["summary"]
            print(f"\nSections: {summary.ok_count}")
        else:
            result = run_profile_analysis(
                profile,
                output_dir,
                subset=args.subset,
                exclude_title_words=args.exclude_title_words,
                top_n=args.top,
                stem=stem,
            )
            summary = result["summary"]
            print(f"\nDone: {summary.total_sources} sources. "
                  f"OK={summary.ok_count}, EMPTY={summary.empty_count}, "
                  f"FAILED={summary.failed_count}, INVALID={summary.invalid_count}.")
            for err in summary.errors:
                print(f"  {err['status']} {err['name']}: {err['error']}")

        print("\nTop terms:")
        _print_top(result["top_terms"])
        print(f"\nTF-IDF: {summary.tfidf_path}")
        print(f"Top terms: {summary.top_terms_path}")
        sys.exit(0)

    except (AnalysisError, FileNotFoundError, PDFReadError, ValueError) as e:
        print(f"Error: {str(e)}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        logger.error("Unexpected error: %s", e, exc_info=args.verbose)
        print(f"Error: {str(e)}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
