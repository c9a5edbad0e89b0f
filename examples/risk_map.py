"""Example pipeline: build a risk map from shorthand and inspect its structure."""

from tapestry_dsl import LayoutOptions, analyze, apply_script, print_graph

TEXT = """
# Project risk map
Vendor delay- -[causes]-> Late launch; Cost overrun-
Late launch > Lost revenue
Extra staff+ /> Late launch
Extra staff -[increases]-> Cost overrun
Budget review:process
"""


def main() -> None:
    result = apply_script(TEXT, mode="replace", layout=LayoutOptions(random_seed=123))
    graph = result.graph
    print(f"Script:\n{print_graph(graph)}")

    names = {element.id: element.name for element in graph.elements}
    stats = analyze(graph.elements, graph.relationships)
    print(f"Nodes: {stats.node_count}, relationships: {stats.rel_count}")
    for category in ("isolated", "source", "sink", "hub", "articulation"):
        members = ", ".join(names[eid] for eid in stats.category(category))
        print(f"{category}: {members or '(none)'}")

    for element in graph.elements:
        print(f"{element.name}: ({element.x:.1f}, {element.y:.1f})")


if __name__ == "__main__":
    main()
