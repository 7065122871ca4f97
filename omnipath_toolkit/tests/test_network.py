"""
Tests for the drug-target network pipeline
"""

import gzip
import logging

import networkx as nx
import pandas as pd
import pytest

from omnipath_toolkit.config import PipelineConfig
from omnipath_toolkit.network import (
    DrugTargetNetworkPipeline,
    build_network,
    drug_targets_in_network,
    filter_interactions,
    path_subnetwork,
    read_table,
    shortest_paths,
)
from omnipath_toolkit.utils.connections import default_registry


@pytest.fixture
def interactions():
    """Small signaling network: EGFR -> GRB2 -> SOS1 -> HRAS -> RAF1 -> MAP2K1."""
    df = pd.DataFrame({
        "source_genesymbol": ["EGFR", "GRB2", "SOS1", "HRAS", "RAF1", "PTEN", "EGFR", "TP53"],
        "target_genesymbol": ["GRB2", "SOS1", "HRAS", "RAF1", "MAP2K1", "AKT1", "PIK3CA", "MDM2"],
        "consensus_direction": [1, 1, 1, 1, 1, 1, 1, 0],
        "consensus_stimulation": [1, 1, 1, 1, 1, 0, 1, 1],
        "consensus_inhibition": [0, 0, 0, 0, 0, 1, 0, 0],
        "curation_effort": [5, 3, 2, 8, 4, 6, 1, 2],
    })
    df.attrs["source"] = "OmniPath"
    return df


@pytest.fixture
def drug_targets():
    return pd.DataFrame({
        "drug": ["Erlotinib", "Gefitinib", "Sorafenib", "Nutlin-3"],
        "target_genesymbol": ["EGFR", "EGFR", "RAF1", "MDM2"],
    })


@pytest.fixture
def graph(interactions):
    return build_network(interactions)


class TestReadTable:
    """Tests for read_table."""

    def test_read_tsv(self, tmp_path, interactions, caplog):
        path = tmp_path / "interactions.tsv"
        interactions.to_csv(path, sep="\t", index=False)

        with caplog.at_level(logging.INFO):
            df = read_table(path, resource="OmniPath")

        assert len(df) == len(interactions)
        assert df.attrs["source"] == "OmniPath"
        assert "OmniPath: downloaded 8 records" in caplog.text

    def test_read_gzipped_tsv(self, tmp_path, interactions):
        path = tmp_path / "interactions.tsv.gz"
        with gzip.open(path, "wt") as f:
            interactions.to_csv(f, sep="\t", index=False)

        df = read_table(path)

        assert list(df.columns) == list(interactions.columns)
        assert df.attrs["source"] == "interactions.tsv.gz"

    def test_read_csv(self, tmp_path, drug_targets):
        path = tmp_path / "drug_targets.csv"
        drug_targets.to_csv(path, index=False)

        df = read_table(path)

        assert df["drug"].tolist() == drug_targets["drug"].tolist()

    def test_repeated_reads_release_connections(self, tmp_path, drug_targets):
        path = tmp_path / "drug_targets.csv"
        drug_targets.to_csv(path, index=False)

        for _ in range(3):
            read_table(path)

        assert str(path) not in default_registry().connections

    def test_not_found(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_table(tmp_path / "missing.tsv")

    def test_unsupported_format(self, tmp_path):
        path = tmp_path / "interactions.parquet"
        path.write_bytes(b"")
        with pytest.raises(ValueError, match="Unsupported table format"):
            read_table(path)


class TestFilterInteractions:
    """Tests for filter_interactions."""

    def test_directed_only(self, interactions):
        filtered = filter_interactions(interactions)
        assert len(filtered) == 7
        assert "MDM2" not in filtered["target_genesymbol"].tolist()

    def test_undirected_kept(self, interactions):
        filtered = filter_interactions(interactions, directed_only=False)
        assert len(filtered) == len(interactions)

    def test_curation_effort(self, interactions):
        filtered = filter_interactions(interactions, min_curation_effort=3)
        assert filtered["curation_effort"].min() >= 3
        assert len(filtered) == 5

    def test_provenance_kept(self, interactions):
        filtered = filter_interactions(interactions)
        assert filtered.attrs["source"] == "OmniPath"

    def test_missing_columns_skipped(self):
        df = pd.DataFrame({"source_genesymbol": ["A"], "target_genesymbol": ["B"]})
        assert len(filter_interactions(df, min_curation_effort=5)) == 1


class TestBuildNetwork:
    """Tests for build_network."""

    def test_nodes_and_edges(self, graph, interactions):
        assert isinstance(graph, nx.DiGraph)
        assert graph.number_of_edges() == len(interactions)
        assert graph.has_edge("EGFR", "GRB2")
        assert not graph.has_edge("GRB2", "EGFR")

    def test_edge_signs(self, graph):
        assert graph.edges["EGFR", "GRB2"]["sign"] == 1
        assert graph.edges["PTEN", "AKT1"]["sign"] == -1

    def test_unknown_sign(self):
        df = pd.DataFrame({"source_genesymbol": ["A"], "target_genesymbol": ["B"]})
        assert build_network(df).edges["A", "B"]["sign"] == 0

    def test_alternative_effect_columns(self):
        df = pd.DataFrame({
            "source_genesymbol": ["A"],
            "target_genesymbol": ["B"],
            "is_stimulation": [0],
            "is_inhibition": [1],
        })
        assert build_network(df).edges["A", "B"]["sign"] == -1

    def test_missing_columns(self):
        with pytest.raises(ValueError, match="`target_genesymbol`"):
            build_network(pd.DataFrame({"source_genesymbol": ["A"]}))


class TestDrugTargets:
    """Tests for drug_targets_in_network."""

    def test_only_targets_in_network(self, drug_targets, graph):
        in_network = drug_targets_in_network(drug_targets, graph)
        assert set(in_network["target_genesymbol"]) == {"EGFR", "RAF1", "MDM2"}

    def test_targets_outside_network(self, drug_targets):
        small = nx.DiGraph([("EGFR", "GRB2")])
        in_network = drug_targets_in_network(drug_targets, small)
        assert in_network["drug"].tolist() == ["Erlotinib", "Gefitinib"]

    def test_missing_columns(self, graph):
        with pytest.raises(ValueError):
            drug_targets_in_network(pd.DataFrame({"drug": ["x"]}), graph)


class TestShortestPaths:
    """Tests for shortest_paths and path_subnetwork."""

    def test_single_path(self, graph):
        paths = shortest_paths(graph, ["EGFR"], ["HRAS"])
        assert len(paths) == 1
        assert paths.loc[0, "path"] == ["EGFR", "GRB2", "SOS1", "HRAS"]
        assert paths.loc[0, "length"] == 3

    def test_multiple_shortest_paths(self):
        graph = nx.DiGraph([("A", "B"), ("A", "C"), ("B", "D"), ("C", "D")])
        paths = shortest_paths(graph, "A", "D")
        assert sorted(map(tuple, paths["path"])) == [("A", "B", "D"), ("A", "C", "D")]

    def test_unreachable_and_missing_skipped(self, graph):
        paths = shortest_paths(graph, ["HRAS", "NOT_A_GENE"], ["EGFR", "MAP2K1"])
        assert paths["target"].tolist() == ["MAP2K1"]

    def test_no_paths(self, graph):
        paths = shortest_paths(graph, ["MAP2K1"], ["EGFR"])
        assert paths.empty
        assert list(paths.columns) == ["source", "target", "length", "path"]

    def test_none_sources(self, graph):
        assert shortest_paths(graph, None, ["EGFR"]).empty

    def test_subnetwork(self, graph):
        paths = shortest_paths(graph, ["EGFR"], ["HRAS"])
        sub = path_subnetwork(graph, paths)
        assert set(sub.nodes) == {"EGFR", "GRB2", "SOS1", "HRAS"}
        assert sub.number_of_edges() == 3

    def test_empty_subnetwork(self, graph):
        sub = path_subnetwork(graph, shortest_paths(graph, [], []))
        assert sub.number_of_nodes() == 0


class TestDrugTargetNetworkPipeline:
    """End-to-end tests of the pipeline."""

    @pytest.fixture
    def config(self, tmp_path, interactions, drug_targets):
        interactions_path = tmp_path / "interactions.tsv"
        drug_targets_path = tmp_path / "drug_targets.csv"
        interactions.to_csv(interactions_path, sep="\t", index=False)
        drug_targets.to_csv(drug_targets_path, index=False)

        return PipelineConfig(
            interactions_path=str(interactions_path),
            drug_targets_path=str(drug_targets_path),
            genes_of_interest=["MAP2K1", "AKT1", "UNKNOWN1"],
            output_dir=str(tmp_path / "out"),
            verbose=False,
        )

    def test_run(self, config):
        result = DrugTargetNetworkPipeline(config).run()

        assert set(result.paths["source"]) == {"EGFR", "RAF1"}
        assert set(result.paths["target"]) == {"MAP2K1"}

        nodes = result.nodes.set_index("node")
        assert nodes.loc["EGFR", "drugs"] == "Erlotinib,Gefitinib"
        assert bool(nodes.loc["MAP2K1", "is_gene_of_interest"])
        assert not bool(nodes.loc["GRB2", "is_drug_target"])
        assert len(result.edges) == result.subnetwork.number_of_edges()

    def test_outputs_written(self, config):
        result = DrugTargetNetworkPipeline(config).run()

        assert set(result.output_files) == {"paths", "nodes", "edges"}
        paths = pd.read_csv(result.output_files["paths"], sep="\t")
        assert "EGFR -> GRB2 -> SOS1 -> HRAS -> RAF1 -> MAP2K1" in paths["path"].tolist()

    def test_no_save(self, config, tmp_path):
        result = DrugTargetNetworkPipeline(config).run(save=False)
        assert result.output_files == {}
        assert not (tmp_path / "out").exists()

    def test_missing_genes_warned(self, config, caplog):
        with caplog.at_level(logging.WARNING):
            DrugTargetNetworkPipeline(config).run(save=False)
        assert "`UNKNOWN1`" in caplog.text

    def test_summary(self, config):
        result = DrugTargetNetworkPipeline(config).run(save=False)
        assert result.summary().startswith(f"{len(result.paths)} shortest path")
