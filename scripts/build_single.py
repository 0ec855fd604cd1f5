#!/usr/bin/env python3
"""
Inline a built app's script and stylesheet assets into one standalone HTML file.

Usage:
  python scripts/build_single.py
  python scripts/build_single.py --dist-dir dist-single --output gantt-chart-standalone.html --keep-dist

Reads:
  - dist-single/index.html and the .js/.css files it references

Writes:
  - gantt-chart-standalone.html (dist-single/ is removed afterwards)
"""
from __future__ import annotations

import argparse
import re
import shutil
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple, Union
from urllib.parse import urlparse

from bs4 import BeautifulSoup
from jinja2 import Environment


DEFAULT_DIST_DIR = Path("dist-single")
DEFAULT_OUTPUT_FILE = Path("gantt-chart-standalone.html")
PREVIEW_CHARS = 200

_SCRIPT_RE = re.compile(
    r"""<script\b[^>]*?\ssrc=(?P<q>['"])(?P<path>[^'"]+)(?P=q)[^>]*>.*?</script>""",
    re.IGNORECASE,
)
_STYLESHEET_RE = re.compile(
    r"""<link\b[^>]*?\shref=(?P<q>['"])(?P<path>[^'"]+?\.css)(?P=q)[^>]*>""",
    re.IGNORECASE,
)

# Asset contents are code, never markup to escape
_env = Environment(autoescape=False, keep_trailing_newline=True)
INLINE_SCRIPT = _env.from_string('<script type="module">{{ content }}</script>')
INLINE_STYLE = _env.from_string("<style>{{ content }}</style>")


@dataclass(frozen=True)
class AssetReference:
    kind: str  # "script" or "stylesheet"
    matched_tag: str
    referenced_path: str
    start: int
    end: int


@dataclass(frozen=True)
class Inlined:
    reference: AssetReference
    source: Path


@dataclass(frozen=True)
class Missing:
    reference: AssetReference
    path: Path


AssetInlineResult = Union[Inlined, Missing]


@dataclass
class BuildReport:
    output_file: Path
    size_bytes: int
    results: List[AssetInlineResult] = field(default_factory=list)
    leftover_references: List[str] = field(default_factory=list)
    cleaned_up: bool = False

    @property
    def inlined(self) -> List[Inlined]:
        return [r for r in self.results if isinstance(r, Inlined)]

    @property
    def missing(self) -> List[Missing]:
        return [r for r in self.results if isinstance(r, Missing)]


def _scan(pattern: re.Pattern, kind: str, html_content: str) -> List[AssetReference]:
    return [
        AssetReference(kind=kind, matched_tag=m.group(0), referenced_path=m.group("path"), start=m.start(), end=m.end())
        for m in pattern.finditer(html_content)
    ]


def scan_asset_references(html_content: str) -> Tuple[List[AssetReference], List[AssetReference]]:
    """Return (scripts, stylesheets) references in document order.

    Matching is textual: unusual tag layouts may be missed.
    """
    return _scan(_SCRIPT_RE, "script", html_content), _scan(_STYLESHEET_RE, "stylesheet", html_content)


def resolve_asset(build_dir: Path, referenced_path: str) -> Path:
    # "/assets/app.js?v=3" -> <build_dir>/app.js
    name = Path(urlparse(referenced_path).path).name
    return build_dir / name


def render_inline(reference: AssetReference, content: str) -> str:
    template = INLINE_SCRIPT if reference.kind == "script" else INLINE_STYLE
    return template.render(content=content)


def inline_assets(html_content: str, build_dir: Path) -> Tuple[str, List[AssetInlineResult]]:
    scripts, stylesheets = scan_asset_references(html_content)
    references = sorted(scripts + stylesheets, key=lambda r: r.start)

    results: List[AssetInlineResult] = []
    pieces: List[str] = []
    cursor = 0
    for ref in references:
        if ref.start < cursor:
            # a stylesheet pattern matched inside an already replaced script body
            continue
        asset_path = resolve_asset(build_dir, ref.referenced_path)
        if not asset_path.is_file():
            results.append(Missing(reference=ref, path=asset_path))
            continue
        content = asset_path.read_text(encoding="utf-8")
        pieces.append(html_content[cursor:ref.start])
        pieces.append(render_inline(ref, content))
        cursor = ref.end
        results.append(Inlined(reference=ref, source=asset_path))
    pieces.append(html_content[cursor:])
    return "".join(pieces), results


def find_external_references(html_content: str) -> List[str]:
    soup = BeautifulSoup(html_content, "html.parser")
    leftovers: List[str] = []
    for sc in soup.find_all("script", src=True):
        leftovers.append(sc.get("src"))
    for ln in soup.find_all("link", href=True):
        rel_lower = [r.lower() for r in (ln.get("rel") or [])]
        href = ln.get("href") or ""
        if "stylesheet" in rel_lower or href.lower().endswith(".css"):
            leftovers.append(href)
    return leftovers


def build_single_file(
    build_dir: Path = DEFAULT_DIST_DIR,
    output_file: Path = DEFAULT_OUTPUT_FILE,
    cleanup: bool = True,
) -> BuildReport:
    html_path = build_dir / "index.html"
    html_content = html_path.read_text(encoding="utf-8")
    print(f"Read {html_path} ({len(html_content)} chars)")
    print(f"  preview: {html_content[:PREVIEW_CHARS]!r}")

    scripts, stylesheets = scan_asset_references(html_content)
    print(f"Found {len(scripts)} script tag(s), {len(stylesheets)} stylesheet tag(s)")
    for ref in scripts + stylesheets:
        print(f"  {ref.matched_tag}")

    merged, results = inline_assets(html_content, build_dir)
    for result in results:
        if isinstance(result, Inlined):
            print(f"  inlined {result.reference.kind}: {result.source.name}")
        else:
            print(f"  WARNING: {result.reference.kind} not found, tag kept: {result.path}", file=sys.stderr)

    leftovers = find_external_references(merged)
    for ref in leftovers:
        print(f"  WARNING: external reference remains: {ref}", file=sys.stderr)

    output_file.write_text(merged, encoding="utf-8")
    size_bytes = output_file.stat().st_size
    print(f"Single HTML file created: {output_file}")
    print(f"File size: {size_bytes / 1024 / 1024:.2f} MB")

    report = BuildReport(
        output_file=output_file,
        size_bytes=size_bytes,
        results=results,
        leftover_references=leftovers,
    )

    if cleanup:
        shutil.rmtree(build_dir)
        report.cleaned_up = True
        print(f"Cleaned up {build_dir} directory")
    return report


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Inline built JS/CSS assets into a standalone HTML file")
    parser.add_argument("--dist-dir", type=Path, default=DEFAULT_DIST_DIR, help="Build output directory (default: dist-single)")
    parser.add_argument("--output", type=Path, default=DEFAULT_OUTPUT_FILE, help="Standalone HTML file to write")
    parser.add_argument("--keep-dist", action="store_true", help="Do not delete the build directory afterwards")
    args = parser.parse_args(argv)

    try:
        build_single_file(build_dir=args.dist_dir, output_file=args.output, cleanup=not args.keep_dist)
    except Exception as exc:
        print(f"ERROR: building single file failed: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
