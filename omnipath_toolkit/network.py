"""
Drug-Target Network

Connects drug targets to genes of interest through a signaling network:

1. Read an interaction table (e.g. an OmniPath interactions download)
2. Keep the directed, sufficiently curated interactions
3. Join with a drug-target table
4. Find the shortest paths from drug targets to the genes of interest
5. Export the nodes and edges of the paths, ready for plotting

Example Usage:
    from omnipath_toolkit import DrugTargetNetworkPipeline, PipelineConfig

    config = PipelineConfig(
        interactions_path="interactions.tsv.gz",
        drug_targets_path="drug_targets.csv",
        genes_of_interest=["TP53", "MYC"],
    )
    result = DrugTargetNetworkPipeline(config).run()
    print(result.paths.head())
"""

from dataclasses import dataclass, field
from datetime import datetime
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Set, Union

import networkx as nx
import pandas as pd

from .config import PipelineConfig
from .log import setup_logging
from .utils.connections import close_on_exit, open_connection
from .utils.normalize import empty_no_problem, ensure_list, value_or_default
from .utils.paths import ensure_dir, extract_extension
from .utils.report import copy_attrs, load_success
from .utils.text import plural, pretty_list

logger = logging.getLogger(__name__)

SOURCE_COLUMN = "source_genesymbol"
TARGET_COLUMN = "target_genesymbol"
DRUG_COLUMN = "drug"

PROVENANCE_ATTRS = ("source", "origin")

_SEPARATORS = {"csv": ",", "tsv": "\t", "tab": "\t", "txt": "\t"}


def _table_separator(path: str) -> str:
    ext = extract_extension(path)
    if ext == "gz":
        ext = extract_extension(path.split("?")[0][:-3])

    if ext not in _SEPARATORS:
        raise ValueError(f"Unsupported table format `{ext}`: {path}")

    return _SEPARATORS[ext]


def _check_columns(df: pd.DataFrame, required: Iterable[str], what: str) -> None:
    missing = [col for col in required if col not in df.columns]
    if missing:
        raise ValueError(
            f"{what} table lacks {plural(missing, 'column')}: {pretty_list(missing)}"
        )


def read_table(
    path: Union[str, Path],
    resource: Optional[str] = None,
) -> pd.DataFrame:
    """
    Read a CSV or TSV table, optionally gzip compressed.

    Args:
        path: Path to the table
        resource: Name of the resource, recorded in ``attrs["source"]``;
            the file name by default

    Returns:
        DataFrame
    """
    path = str(path)
    if not Path(path).exists():
        raise FileNotFoundError(f"Table not found: {path}")

    sep = _table_separator(path)

    with close_on_exit(open_connection(path)) as handle:
        df = pd.read_csv(handle, sep=sep)

    df.attrs["source"] = value_or_default(resource, Path(path).name)
    load_success(df, logger=logger)

    return df


def filter_interactions(
    interactions: pd.DataFrame,
    directed_only: bool = True,
    min_curation_effort: int = 0,
) -> pd.DataFrame:
    """
    Filter interactions by direction and curation effort.

    Filters on columns missing from the table are skipped.

    Args:
        interactions: Interaction table
        directed_only: Keep only interactions with consensus direction
        min_curation_effort: Minimum number of curated references

    Returns:
        Filtered table, with the provenance of the input
    """
    mask = pd.Series(True, index=interactions.index)

    if directed_only and "consensus_direction" in interactions.columns:
        mask &= interactions["consensus_direction"].astype(bool)

    if min_curation_effort > 0 and "curation_effort" in interactions.columns:
        mask &= interactions["curation_effort"] >= min_curation_effort

    filtered = interactions[mask].reset_index(drop=True)

    logger.info(
        f"Kept {len(filtered)} of {len(interactions)} interactions "
        f"(directed_only={directed_only}, min_curation_effort={min_curation_effort})"
    )

    return copy_attrs(filtered, interactions, PROVENANCE_ATTRS)


def _effect_columns(interactions: pd.DataFrame) -> Optional[tuple]:
    for prefix in ("consensus_", "is_"):
        cols = (f"{prefix}stimulation", f"{prefix}inhibition")
        if all(c in interactions.columns for c in cols):
            return cols
    return None


def build_network(interactions: pd.DataFrame) -> nx.DiGraph:
    """
    Build a directed graph from an interaction table.

    Edges carry a ``sign`` attribute: 1 for stimulation, -1 for inhibition,
    0 if unknown or both.
    """
    _check_columns(interactions, (SOURCE_COLUMN, TARGET_COLUMN), "Interaction")

    effect_cols = _effect_columns(interactions)
    graph = nx.DiGraph()

    for row in interactions.itertuples(index=False):
        row = row._asdict()
        sign = 0
        if effect_cols:
            stimulation = bool(row[effect_cols[0]])
            inhibition = bool(row[effect_cols[1]])
            sign = int(stimulation) - int(inhibition)
        graph.add_edge(row[SOURCE_COLUMN], row[TARGET_COLUMN], sign=sign)

    logger.info(
        f"Built network with {graph.number_of_nodes()} nodes "
        f"and {graph.number_of_edges()} edges"
    )

    return graph


def drug_targets_in_network(
    drug_targets: pd.DataFrame,
    graph: nx.DiGraph,
) -> pd.DataFrame:
    """Keep the drug-target pairs whose target is a node of the network."""
    _check_columns(drug_targets, (DRUG_COLUMN, TARGET_COLUMN), "Drug-target")

    in_network = drug_targets[drug_targets[TARGET_COLUMN].isin(list(graph.nodes))]
    in_network = in_network.drop_duplicates().reset_index(drop=True)

    logger.info(
        f"{in_network[TARGET_COLUMN].nunique()} of "
        f"{drug_targets[TARGET_COLUMN].nunique()} drug targets are in the network"
    )

    return in_network


def shortest_paths(
    graph: nx.DiGraph,
    sources: Union[str, Iterable[str]],
    targets: Union[str, Iterable[str]],
) -> pd.DataFrame:
    """
    All shortest paths from each source to each target.

    Nodes missing from the graph and unreachable pairs are skipped.

    Returns:
        DataFrame with columns ``source``, ``target``, ``length`` (number of
        edges) and ``path`` (list of nodes)
    """
    rows: List[Dict[str, Any]] = []
    sources = [s for s in ensure_list(sources) if s in graph]
    targets = [t for t in ensure_list(targets) if t in graph]

    for source in sources:
        for target in targets:
            if source == target or not nx.has_path(graph, source, target):
                continue
            for path in nx.all_shortest_paths(graph, source, target):
                rows.append({
                    "source": source,
                    "target": target,
                    "length": len(path) - 1,
                    "path": path,
                })

    return pd.DataFrame(rows, columns=["source", "target", "length", "path"])


def _path_nodes(paths: List[List[str]]) -> Set[str]:
    return {node for path in paths for node in path}


def path_subnetwork(graph: nx.DiGraph, paths: pd.DataFrame) -> nx.DiGraph:
    """The subnetwork induced by the nodes of ``paths``."""
    nodes = empty_no_problem(paths["path"].tolist(), _path_nodes, default=set())
    return graph.subgraph(nodes).copy()


@dataclass
class NetworkResult:
    """Output of the drug-target network pipeline."""

    paths: pd.DataFrame
    nodes: pd.DataFrame
    edges: pd.DataFrame
    subnetwork: nx.DiGraph
    runtime_seconds: float = 0.0
    output_files: Dict[str, str] = field(default_factory=dict)

    def summary(self) -> str:
        """One line summary of the result."""
        return (
            f"{len(self.paths)} shortest {plural(self.paths, 'path')}, "
            f"{len(self.nodes)} {plural(self.nodes, 'node')}, "
            f"{len(self.edges)} {plural(self.edges, 'edge')}"
        )


class DrugTargetNetworkPipeline:
    """
    Connects drug targets to genes of interest in a signaling network.
    """

    def __init__(self, config: PipelineConfig):
        """
        Initialize pipeline.

        Args:
            config: Pipeline configuration
        """
        self.config = config
        setup_logging(config.verbose)

    def run(self, save: bool = True) -> NetworkResult:
        """
        Execute the pipeline.

        Args:
            save: Write the paths, nodes and edges tables to the output
                directory

        Returns:
            NetworkResult
        """
        start_time = datetime.now()
        logger.info("Starting drug-target network pipeline")

        interactions = read_table(self.config.interactions_path, resource="OmniPath")
        drug_targets = read_table(self.config.drug_targets_path, resource="Drug targets")

        interactions = filter_interactions(
            interactions,
            directed_only=self.config.directed_only,
            min_curation_effort=self.config.min_curation_effort,
        )
        graph = build_network(interactions)
        drug_targets = drug_targets_in_network(drug_targets, graph)

        genes = self.config.genes_of_interest
        missing = [g for g in genes if g not in graph]
        if missing:
            logger.warning(
                f"{plural(missing, 'Gene')} of interest not in the network: "
                f"{pretty_list(missing)}"
            )

        paths = shortest_paths(graph, drug_targets[TARGET_COLUMN].unique(), genes)
        subnetwork = path_subnetwork(graph, paths)

        result = NetworkResult(
            paths=paths,
            nodes=self._node_table(subnetwork, drug_targets, genes),
            edges=self._edge_table(subnetwork),
            subnetwork=subnetwork,
        )

        if save:
            result.output_files = self._save(result)

        result.runtime_seconds = (datetime.now() - start_time).total_seconds()
        logger.info(f"Pipeline finished: {result.summary()}")

        return result

    @staticmethod
    def _node_table(
        subnetwork: nx.DiGraph,
        drug_targets: pd.DataFrame,
        genes: List[str],
    ) -> pd.DataFrame:
        drugs_by_target = drug_targets.groupby(TARGET_COLUMN)[DRUG_COLUMN].agg(
            lambda drugs: ",".join(sorted(set(drugs)))
        )
        rows = [
            {
                "node": node,
                "is_drug_target": node in drugs_by_target.index,
                "drugs": drugs_by_target.get(node, ""),
                "is_gene_of_interest": node in genes,
            }
            for node in sorted(subnetwork.nodes)
        ]
        return pd.DataFrame(
            rows, columns=["node", "is_drug_target", "drugs", "is_gene_of_interest"]
        )

    @staticmethod
    def _edge_table(subnetwork: nx.DiGraph) -> pd.DataFrame:
        rows = [
            {"source": u, "target": v, "sign": data.get("sign", 0)}
            for u, v, data in sorted(
                subnetwork.edges(data=True), key=lambda edge: (edge[0], edge[1])
            )
        ]
        return pd.DataFrame(rows, columns=["source", "target", "sign"])

    def _save(self, result: NetworkResult) -> Dict[str, str]:
        output_dir = Path(self.config.output_dir)
        ensure_dir(output_dir / "paths.tsv")

        tables = {
            "paths": result.paths.assign(
                path=result.paths["path"].map(" -> ".join)
            ),
            "nodes": result.nodes,
            "edges": result.edges,
        }
        files = {}
        for name, table in tables.items():
            path = output_dir / f"{name}.tsv"
            table.to_csv(path, sep="\t", index=False)
            files[name] = str(path)

        logger.info(f"Saved {pretty_list(files, quotes=False)} tables to {output_dir}")

        return files
