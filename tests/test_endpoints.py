"""
Tests for the HTTP API using FastAPI's TestClient.

The remote embedding service is replaced by a mock client injected through
app_state.set_services().
"""

import os
import sys
import unittest
from unittest.mock import Mock

from fastapi.testclient import TestClient

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from ai.embedding_client import EmbeddingServiceError
from db.kv_store import MemoryKeyValueStore
from utils import app_state
from main import app


class TestEndpoints(unittest.TestCase):
    """Test cases for the API routers."""

    def setUp(self):
        self.client = Mock()
        self.client.embed.side_effect = lambda texts: {
            "embeddings": [[1.0, float(i), 0.5] for i, _ in enumerate(texts)],
            "model_used": "test-model",
        }
        self.client.status.return_value = True
        self.client.index_documents.return_value = {"indexed": True}
        self.client.search.return_value = {
            "results": [{"id": "doc_0", "score": 0.85, "payload": {"text": "hello"}}],
            "search_time_ms": 5,
            "metric_used": "cosine",
        }
        app_state.set_services(self.client, MemoryKeyValueStore())
        self.http = TestClient(app)

    def test_health(self):
        resp = self.http.get("/api/health")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["status"], "ok")

    def test_status(self):
        resp = self.http.get("/api/status")
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.json()["online"])

    def test_create_list_and_compare(self):
        """Test the create -> list -> compare flow."""
        resp = self.http.post("/api/embeddings", json={"text": "first\nsecond", "mode": "lines"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["count"], 2)

        listing = self.http.get("/api/embeddings").json()
        self.assertEqual(listing["total"], 2)
        self.assertEqual([e["text"] for e in listing["embeddings"]], ["first", "second"])

        resp = self.http.post("/api/embeddings/compare", json={"index_a": 0, "index_b": 1, "seed": 1})
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertIn(body["classification"], (
            "near-duplicate", "closely related", "some common themes", "loosely related", "unrelated"
        ))
        self.assertEqual(body["texts"], ["first", "second"])

    def test_create_blank_text_is_400(self):
        resp = self.http.post("/api/embeddings", json={"text": "   "})
        self.assertEqual(resp.status_code, 400)
        self.assertIn("error", resp.json())

    def test_remote_failure_is_502(self):
        self.client.embed.side_effect = EmbeddingServiceError("service down")
        resp = self.http.post("/api/embeddings", json={"text": "hello"})
        self.assertEqual(resp.status_code, 502)

    def test_compare_missing_entry_is_404(self):
        resp = self.http.post("/api/embeddings/compare", json={"index_a": 0, "index_b": 1})
        self.assertEqual(resp.status_code, 404)

    def test_search_delete_and_export(self):
        self.http.post("/api/embeddings", json={"text": "Password reset\nBilling", "mode": "lines"})

        found = self.http.get("/api/embeddings/search", params={"q": "password"}).json()
        self.assertEqual(found["count"], 1)

        exported = self.http.get("/api/embeddings/export").json()
        self.assertEqual(exported["total_count"], 2)

        resp = self.http.delete("/api/embeddings/0")
        self.assertEqual(resp.json()["deleted"], "Password reset")
        self.assertEqual(self.http.delete("/api/embeddings/9").status_code, 404)

    def test_export_empty_is_400(self):
        self.assertEqual(self.http.get("/api/embeddings/export").status_code, 400)

    def test_compare_vectors(self):
        resp = self.http.post("/api/vectors/compare", json={"a": [1, 0, 0], "b": [0, 1, 0]})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["similarity"], 0)

        resp = self.http.post("/api/vectors/compare", json={"a": [1, 2, 3], "b": [1, 2, 3, 4]})
        self.assertEqual(resp.status_code, 400)

    def test_chunk_preview(self):
        resp = self.http.post("/api/documents/chunk", json={"text": "abcdefghij", "size": 4, "overlap": 1})
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual([f["text"] for f in body["fragments"]], ["abcd", "defg", "ghij", "j"])
        self.assertEqual([f["offset"] for f in body["fragments"]], [0, 3, 6, 9])

    def test_chunk_preview_pages_and_template(self):
        body = self.http.post("/api/documents/chunk", json={"text": "a\n\nb", "method": "pages"}).json()
        self.assertEqual([f["text"] for f in body["fragments"]], ["a", "b"])

        body = self.http.post("/api/documents/chunk", json={"text": "x", "template": "legal_documents"}).json()
        self.assertEqual((body["size"], body["overlap"]), (3000, 300))

    def test_chunk_preview_invalid_config_is_400(self):
        resp = self.http.post("/api/documents/chunk", json={"text": "abc", "size": 4, "overlap": 4})
        self.assertEqual(resp.status_code, 400)

    def test_templates(self):
        templates = self.http.get("/api/templates").json()
        by_id = {t["id"]: t for t in templates}
        self.assertEqual(by_id["product_catalog"]["chunk_size"], 1000)
        self.assertEqual(by_id["product_catalog"]["chunk_overlap"], 50)

    def test_build_and_index_documents(self):
        """Test uploaded text can be split and then indexed."""
        built = self.http.post("/api/documents", json={
            "filename": "faq.txt", "text": "abcdefghij", "size": 4, "overlap": 1,
        }).json()
        self.assertEqual(built["count"], 4)

        resp = self.http.post("/api/collections/support_kb/index", json={"documents": built["documents"]})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["count"], 4)

        collection, documents = self.client.index_documents.call_args[0]
        self.assertEqual(collection, "support_kb")
        self.assertEqual(documents[1]["id"], "faq_1")
        self.assertEqual(documents[1]["metadata"]["source"], "faq.txt")
        self.assertEqual(documents[1]["metadata"]["chunk_index"], 1)

    def test_index_empty_is_400(self):
        resp = self.http.post("/api/collections/kb/index", json={"documents": []})
        self.assertEqual(resp.status_code, 400)

    def test_search(self):
        resp = self.http.post("/api/search", json={"collection_name": "kb", "query_text": "hello"})
        self.assertEqual(resp.status_code, 200)
        result = resp.json()["results"][0]
        self.assertEqual(result["band"], "high")
        self.assertEqual(result["display_score"], "85.0%")

    def test_search_requires_query(self):
        resp = self.http.post("/api/search", json={"collection_name": "kb"})
        self.assertEqual(resp.status_code, 400)

    def test_index_documents_without_ids_get_distinct_ids(self):
        """Test documents posted without ids in one batch are given different ids."""
        resp = self.http.post("/api/collections/c1/index", json={
            "documents": [{"text": "one"}, {"text": "two"}, {"text": "three"}],
        })
        self.assertEqual(resp.status_code, 200)
        documents = self.client.index_documents.call_args[0][1]
        ids = [doc["id"] for doc in documents]
        self.assertEqual(len(set(ids)), 3)
        self.assertTrue(all(i.startswith("doc_") for i in ids))

    def test_index_duplicate_ids_is_400(self):
        resp = self.http.post("/api/collections/c1/index", json={
            "documents": [{"id": "d1", "text": "one"}, {"id": "d1", "text": "two"}],
        })
        self.assertEqual(resp.status_code, 400)
        self.client.index_documents.assert_not_called()

    def test_null_numbers_are_rejected(self):
        """Test null sizes and limits fail validation instead of reaching the services."""
        resp = self.http.post("/api/documents/chunk", json={"text": "abc", "size": None})
        self.assertEqual(resp.status_code, 422)
        resp = self.http.post("/api/documents", json={"filename": "a.txt", "text": "abc", "overlap": None})
        self.assertEqual(resp.status_code, 422)
        resp = self.http.post("/api/search", json={"collection_name": "kb", "query_text": "x", "limit": None})
        self.assertEqual(resp.status_code, 422)
        resp = self.http.post("/api/search", json={"collection_name": "kb", "query_text": "x", "ef_param": None})
        self.assertEqual(resp.status_code, 422)
        self.client.search.assert_not_called()

    def test_search_with_vector_string(self):
        resp = self.http.post("/api/search", json={"collection_name": "kb", "query_vector": "[0.1, 0.2]"})
        self.assertEqual(resp.status_code, 200)
        params = self.client.search.call_args[0][0]
        self.assertEqual(params["query_vector"], [0.1, 0.2])

        resp = self.http.post("/api/search", json={"collection_name": "kb", "query_vector": "not json"})
        self.assertEqual(resp.status_code, 400)


if __name__ == "__main__":
    unittest.main()
