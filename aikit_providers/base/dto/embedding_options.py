"""
Pydantic DTOs for embedding requests.

Purpose
-------
Mirror :mod:`generation_options` for the embedding adapters: one shared
:class:`EmbeddingOptions` plus one subclass per vendor. Construction-time
defaults and call-time options are merged field by field; the call wins.

Failure modes
-------------
- ``pydantic.ValidationError`` on an empty ``model`` or a non-positive
  ``dimensions``. The embedding facade converts this into
  ``ConfigurationError``.
"""
from __future__ import annotations

from typing import Any, Dict, Literal, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field

EmbeddingOptionsT = TypeVar("EmbeddingOptionsT", bound="EmbeddingOptions")


class EmbeddingOptions(BaseModel):
    """Options understood by every embedding vendor.

    Attributes:
        model: Embedding model identifier (mandatory, non-empty).
        dimensions: Requested vector size, for models that can shorten it.
    """

    model_config = ConfigDict(extra="ignore")

    model: str = Field(..., min_length=1)
    dimensions: Optional[int] = Field(default=None, gt=0)

    @classmethod
    def merge(
        cls: Type[EmbeddingOptionsT],
        defaults: Union["EmbeddingOptions", Mapping[str, Any], None],
        overrides: Union["EmbeddingOptions", Mapping[str, Any], None],
    ) -> EmbeddingOptionsT:
        """Shallow-merge ``defaults`` and ``overrides`` into an instance of ``cls``."""
        merged: Dict[str, Any] = {}
        for source in (defaults, overrides):
            if source is None:
                continue
            if isinstance(source, EmbeddingOptions):
                merged.update({name: getattr(source, name) for name in source.model_fields_set})
            else:
                merged.update({k: v for k, v in source.items() if v is not None})
        return cls.model_validate(merged)


class OpenAIEmbeddingOptions(EmbeddingOptions):
    """OpenAI ``/embeddings`` extensions."""

    encoding_format: Optional[Literal["float", "base64"]] = None
    user: Optional[str] = None


class GeminiEmbeddingOptions(EmbeddingOptions):
    """Gemini ``batchEmbedContents`` extensions."""

    task_type: Optional[
        Literal[
            "RETRIEVAL_QUERY",
            "RETRIEVAL_DOCUMENT",
            "SEMANTIC_SIMILARITY",
            "CLASSIFICATION",
            "CLUSTERING",
            "QUESTION_ANSWERING",
            "FACT_VERIFICATION",
            "CODE_RETRIEVAL_QUERY",
        ]
    ] = None
    title: Optional[str] = None


__all__ = ["EmbeddingOptions", "OpenAIEmbeddingOptions", "GeminiEmbeddingOptions"]
