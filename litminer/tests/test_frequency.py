import math

import numpy as np
import pytest

from litminer.analyzers.frequency import DocumentFrequencyMatrix, FrequencyTable

WHALE_SAMPLE = (
    "Call me Ishmael. Some years ago, never mind how long precisely, having "
    "little or no money in my purse, I thought I would sail about and see the "
    "watery part of the world. The whale surfaced; the whale's spout rose high, "
    "and another whale dove deep beneath the grey sea."
)


def whale_table():
    from litminer.analyzers.tokenizer import WordTokenizer

    doc = WordTokenizer().tokenize("sample.txt", WHALE_SAMPLE)
    return doc, FrequencyTable.from_tokens(doc.tokens)


class TestFrequencyTable:
    def test_sample_has_fifty_tokens(self):
        doc, table = whale_table()
        assert len(doc.tokens) == 50
        assert table.total == 50

    def test_count_single_token(self):
        _, table = whale_table()
        assert table.count("whale") == 2

    def test_count_token_group(self):
        _, table = whale_table()
        assert table.count(["whale", "whale's"]) == 3

    def test_duplicate_query_tokens_counted_once(self):
        _, table = whale_table()
        assert table.count(["whale", "whale", "whale's"]) == 3

    def test_missing_token_is_zero(self):
        table = FrequencyTable.from_tokens(["sea", "ship"])
        assert table["leviathan"] == 0
        assert table.count("leviathan") == 0
        assert "leviathan" not in table

    def test_add_rejects_negative_counts(self):
        table = FrequencyTable()
        with pytest.raises(ValueError):
            table.add("whale", -1)

    def test_top_orders_by_count(self):
        table = FrequencyTable.from_tokens(["sea", "whale", "whale", "ship", "whale", "sea"])
        assert table.top(2) == [("whale", 3), ("sea", 2)]

    def test_top_ties_keep_first_occurrence_order(self):
        table = FrequencyTable.from_tokens(["b", "a", "b", "a", "c"])
        assert table.top(2) == [("b", 2), ("a", 2)]
        assert table.top(2) == table.top(2)

    def test_top_without_n_returns_everything(self):
        table = FrequencyTable.from_tokens(["a", "b", "a"])
        assert table.top() == [("a", 2), ("b", 1)]

    def test_relative_sums_to_per(self):
        _, table = whale_table()
        relative = table.relative(per=100)
        assert sum(relative.values()) == pytest.approx(100.0)
        assert relative["whale"] == pytest.approx(4.0)

    def test_relative_frequency_of_group(self):
        _, table = whale_table()
        assert table.relative_frequency(["whale", "whale's"]) == pytest.approx(6.0)

    def test_empty_table_relative_is_undefined(self):
        table = FrequencyTable()
        assert table.total == 0
        assert table.relative() is None
        assert math.isnan(table.relative_frequency("whale"))

    def test_merge_adds_counts(self):
        a = FrequencyTable.from_tokens(["whale", "sea"])
        b = FrequencyTable.from_tokens(["whale", "ship"])
        merged = a.merge(b)
        assert merged["whale"] == 2
        assert merged.total == 4
        assert a.total == 2

    def test_equality_and_dict(self):
        a = FrequencyTable({"whale": 2, "sea": 1})
        b = FrequencyTable.from_tokens(["whale", "sea", "whale"])
        assert a == b
        assert a.to_dict() == {"whale": 2, "sea": 1}


class TestDocumentFrequencyMatrix:
    def test_vocabulary_in_first_occurrence_order(self):
        matrix = DocumentFrequencyMatrix.from_documents([["a", "b"], ["b", "c"]])
        assert matrix.vocabulary == ["a", "b", "c"]
        assert matrix.shape == (2, 3)
        assert matrix.labels == ["doc_1", "doc_2"]

    def test_dense_fills_absent_entries_with_zero(self):
        matrix = DocumentFrequencyMatrix.from_documents([["a", "b", "a"], ["b", "c"]])
        np.testing.assert_array_equal(matrix.dense(), [[2, 1, 0], [0, 1, 1]])

    def test_label_count_must_match(self):
        with pytest.raises(ValueError):
            DocumentFrequencyMatrix([FrequencyTable()], labels=["one", "two"])

    def test_partition_sum_equals_concatenated_corpus(self):
        doc, _ = whale_table()
        tokens = doc.tokens
        parts = [tokens[:13], tokens[13:31], tokens[31:]]
        matrix = DocumentFrequencyMatrix.from_documents(parts)
        assert matrix.corpus_table() == FrequencyTable.from_tokens(tokens)
        assert sum(matrix.totals()) == len(tokens)

    def test_column_and_relative_column(self):
        matrix = DocumentFrequencyMatrix.from_documents(
            [["whale", "sea"], ["whale", "whale", "whale's", "sea"]]
        )
        assert matrix.column("whale") == [1, 2]
        assert matrix.column(["whale", "whale's"]) == [1, 3]
        assert matrix.relative_column("whale") == [pytest.approx(50.0), pytest.approx(50.0)]

    def test_empty_document_rows_are_nan(self):
        matrix = DocumentFrequencyMatrix.from_documents([["whale", "sea"], []])
        relative = matrix.relative_dense()
        assert relative[0].tolist() == [pytest.approx(50.0), pytest.approx(50.0)]
        assert np.isnan(relative[1]).all()
        assert math.isnan(matrix.relative_column("whale")[1])

    def test_relative_rows_sum_to_per(self):
        matrix = DocumentFrequencyMatrix.from_documents([["a", "b", "c"], ["a", "a"]])
        np.testing.assert_allclose(matrix.relative_dense().sum(axis=1), [100.0, 100.0])

    def test_to_dict(self):
        matrix = DocumentFrequencyMatrix.from_documents([["a"], ["b"]], labels=["one", "two"])
        data = matrix.to_dict()
        assert data["labels"] == ["one", "two"]
        assert data["vocabulary"] == ["a", "b"]
        assert data["totals"] == [1, 1]
        assert data["rows"] == [{"a": 1}, {"b": 1}]


class TestTabulate:
    def test_uses_filtered_tokens_when_removing_stopwords(self):
        from litminer.analyzers.frequency import tabulate
        from litminer.analyzers.tokenizer import WordTokenizer
        from litminer.config import AnalysisConfig

        config = AnalysisConfig(remove_stopwords=True)
        doc = WordTokenizer(config).tokenize("x.txt", "The whale and the sea", title="CHAPTER 1")
        matrix = tabulate([doc], config)
        assert matrix.labels == ["CHAPTER 1"]
        assert "the" not in matrix.vocabulary
        assert matrix.column("whale") == [1]

    def test_keeps_stopwords_when_disabled(self):
        from litminer.analyzers.frequency import tabulate
        from litminer.analyzers.tokenizer import WordTokenizer
        from litminer.config import AnalysisConfig

        config = AnalysisConfig(remove_stopwords=False)
        doc = WordTokenizer(config).tokenize("x.txt", "The whale and the sea", index=2)
        matrix = tabulate([doc], config)
        assert matrix.column("the") == [2]
        assert matrix.labels == ["x.txt#3"]
