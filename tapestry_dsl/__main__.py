import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from tapestry_dsl import (
    CATEGORY_TAGS,
    Graph,
    LayoutOptions,
    ValidationError,
    analyze,
    apply_script,
    print_graph,
    tag_category,
    validate_graph,
)

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def _load_graph(path: Optional[str]) -> Graph:
    if not path:
        return Graph()
    try:
        with open(path, encoding="utf-8") as fin:
            graph = Graph.from_dict(json.load(fin))
    except (OSError, ValueError, KeyError, AttributeError, TypeError) as exc:
        logger.error("Cannot read graph from %s: %s", path, exc)
        raise SystemExit(1)
    try:
        validate_graph(graph)
    except ValidationError as exc:
        logger.error("Invalid graph in %s: %s", path, exc)
        raise SystemExit(1)
    return graph


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Apply a Tapestry shorthand script to a graph")
    parser.add_argument("path", help="Path to the shorthand script")
    parser.add_argument(
        "--graph",
        help="JSON graph the script is applied to (default: empty graph)",
    )
    parser.add_argument(
        "--mode",
        choices=["merge", "replace"],
        default="merge",
        help="Reconciliation policy (default: merge)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for placing new elements",
    )
    parser.add_argument(
        "--analyze",
        action="store_true",
        help="Print structural analysis of the resulting graph",
    )
    parser.add_argument(
        "--tag",
        nargs="+",
        choices=sorted(CATEGORY_TAGS),
        default=[],
        metavar="CATEGORY",
        help="Tag elements of the given analysis categories",
    )
    parser.add_argument(
        "--print-dsl",
        action="store_true",
        help="Print the resulting graph in shorthand form",
    )
    parser.add_argument(
        "--output",
        help="Write the resulting graph as JSON to the given path",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO)",
    )
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)

    graph = _load_graph(args.graph)
    try:
        with open(args.path, encoding="utf-8") as fin:
            text = fin.read()
    except OSError as exc:
        logger.error("Cannot read script from %s: %s", args.path, exc)
        raise SystemExit(1)

    logger.info("Applying script from %s", args.path)
    result = apply_script(text, graph, args.mode, LayoutOptions(random_seed=args.seed))
    new_graph = result.graph

    print(f"Elements: {len(new_graph.elements)}")
    print(f"Relationships: {len(new_graph.relationships)}")
    print(f"Created: {', '.join(result.created_names) or '(none)'}")
    print("Warnings:")
    if result.warnings:
        for warning in result.warnings:
            print(f"  - {warning}")
    else:
        print("  (none)")
    if result.dropped:
        print("Dropped relationships:")
        for rel in result.dropped:
            print(f"  - {rel.source_name} -[{rel.label}]- {rel.target_name}")

    if args.analyze or args.tag:
        analysis = analyze(new_graph.elements, new_graph.relationships)
        for category in args.tag:
            tag_category(new_graph, analysis, category, "add")
        if args.analyze:
            names = {e.id: e.name for e in new_graph.elements}
            print("Analysis:")
            print(f"  nodes: {analysis.node_count}")
            print(f"  relationships: {analysis.rel_count}")
            print(f"  average degree: {analysis.avg_degree:.1f}")
            for category in CATEGORY_TAGS:
                members = [names[eid] for eid in analysis.category(category)]
                print(f"  {category}: {', '.join(members) or '(none)'}")

    if args.print_dsl:
        try:
            script = print_graph(new_graph)
        except ValueError as exc:
            logger.error("Cannot print graph as a script: %s", exc)
        else:
            print("Script:")
            print(script, end="")

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        logger.info("Writing graph to %s", output_path)
        output_path.write_text(json.dumps(new_graph.to_dict(), indent=2), encoding="utf-8")
        print(f"Graph written to {output_path}")


if __name__ == "__main__":
    main(sys.argv[1:])
