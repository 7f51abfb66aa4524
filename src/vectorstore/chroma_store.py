"""ChromaDB vector store integration for reference document chunks."""

import logging

import chromadb
from chromadb.config import Settings as ChromaSettings

from src.errors import InvalidConfig, VectorIndexError
from src.vectorstore.index import IndexMatch, IndexRecord, VectorIndex

logger = logging.getLogger(__name__)

COLLECTION_NAME = "finance-index"


class ChromaStore(VectorIndex):
    """ChromaDB-backed vector index for document chunks.

    Manages a single collection with cosine distance. The configured
    dimension is written into the collection metadata on creation; reopening
    an existing collection with a different dimension is a configuration
    error.
    """

    def __init__(
        self,
        path: str = "./data/chroma",
        dimension: int = 1536,
        collection_name: str = COLLECTION_NAME,
    ):
        if path == ":memory:":
            self._client = chromadb.Client()
        else:
            self._client = chromadb.PersistentClient(
                path=path,
                settings=ChromaSettings(anonymized_telemetry=False),
            )
        self._collection = self._client.get_or_create_collection(
            name=collection_name,
            metadata={"hnsw:space": "cosine", "dimension": dimension},
        )
        stored = (self._collection.metadata or {}).get("dimension", dimension)
        if stored != dimension:
            raise InvalidConfig(
                f"Collection '{collection_name}' holds {stored}-dimensional vectors, "
                f"configured dimension is {dimension}"
            )
        self._dimension = dimension

    @property
    def dimension(self) -> int:
        return self._dimension

    def upsert(self, records: list[IndexRecord]) -> None:
        if not records:
            return

        ids = []
        embeddings = []
        documents = []
        metadatas = []

        for record in records:
            if len(record.vector) != self._dimension:
                raise InvalidConfig(
                    f"Record {record.id} has dimension {len(record.vector)}, "
                    f"index expects {self._dimension}"
                )
            metadata = dict(record.metadata)
            ids.append(record.id)
            embeddings.append(record.vector)
            documents.append(metadata.pop("text", ""))
            metadatas.append(metadata)

        try:
            self._collection.upsert(
                ids=ids,
                embeddings=embeddings,
                documents=documents,
                metadatas=metadatas,
            )
        except Exception as e:
            raise VectorIndexError(f"Chroma upsert of {len(ids)} records failed: {e}") from e

    def query(self, vector: list[float], k: int) -> list[IndexMatch]:
        """Query the collection for the k nearest chunks.

        Chroma reports cosine distance in [0, 2]; it is mapped to a
        similarity score in [0, 1] as 1 - distance / 2.
        """
        if len(vector) != self._dimension:
            raise InvalidConfig(
                f"Query vector has dimension {len(vector)}, index expects {self._dimension}"
            )
        try:
            available = self._collection.count()
            if available == 0 or k <= 0:
                return []
            results = self._collection.query(
                query_embeddings=[vector],
                n_results=min(k, available),
                include=["documents", "metadatas", "distances"],
            )
        except Exception as e:
            raise VectorIndexError(f"Chroma query failed: {e}") from e

        output = []
        if results["ids"] and results["ids"][0]:
            for i in range(len(results["ids"][0])):
                metadata = results["metadatas"][0][i] if results["metadatas"] else {}
                distance = results["distances"][0][i] if results["distances"] else 2.0
                output.append(IndexMatch(
                    id=results["ids"][0][i],
                    text=results["documents"][0][i] if results["documents"] else "",
                    score=max(0.0, min(1.0, 1.0 - distance / 2.0)),
                    metadata=dict(metadata or {}),
                ))
        output.sort(key=lambda m: m.score, reverse=True)
        return output

    def delete_document(self, source: str) -> None:
        try:
            self._collection.delete(where={"source": source})
        except Exception as e:
            raise VectorIndexError(f"Chroma delete for '{source}' failed: {e}") from e
        logger.info("Deleted chunks for %s", source)

    @property
    def count(self) -> int:
        """Return the number of chunks in the collection."""
        return self._collection.count()
