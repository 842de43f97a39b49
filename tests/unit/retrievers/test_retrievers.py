"""Unit tests for retrievers and the retriever factory."""

from pathlib import Path

import pytest
from llama_stack_client import APIConnectionError
from pytest_mock import MockerFixture

from agents.agent_error import RagConfigurationError
from models.config import RetrieverConfiguration
from retrievers.file_retriever import FileRetriever
from retrievers.retriever_error import RetrievalError
from retrievers.retriever_factory import get_retriever
from retrievers.vector_io_retriever import VectorIORetriever


@pytest.fixture(name="context_file")
def context_file_fixture(tmp_path: Path) -> Path:
    """Context file with trailing newline."""
    path = tmp_path / "context.txt"
    path.write_text("The price of X is 10 USD.\n", encoding="utf-8")
    return path


@pytest.mark.asyncio
async def test_file_retriever(context_file: Path) -> None:
    """Test that file retriever returns the whole file for any query."""
    retriever = FileRetriever(context_file)

    assert await retriever.invoke("What is X?") == "The price of X is 10 USD."
    assert await retriever.invoke("") == "The price of X is 10 USD."


@pytest.mark.asyncio
async def test_file_retriever_missing_file(tmp_path: Path) -> None:
    """Test that unreadable file is reported as retrieval error."""
    retriever = FileRetriever(tmp_path / "missing.txt")

    with pytest.raises(RetrievalError, match="Unable to read context file"):
        await retriever.invoke("What is X?")


@pytest.mark.asyncio
async def test_vector_io_retriever(mocker: MockerFixture) -> None:
    """Test that chunks are joined into a single context."""
    client = mocker.AsyncMock()
    client.vector_io.query.return_value = mocker.Mock(
        chunks=[
            mocker.Mock(content="The price of X is 10 USD."),
            mocker.Mock(content="The price of Y is 20 USD."),
        ]
    )
    retriever = VectorIORetriever(client, "prices", max_chunks=2)

    context = await retriever.invoke("What is X?")

    assert context == "The price of X is 10 USD.\n\nThe price of Y is 20 USD."
    client.vector_io.query.assert_called_once_with(
        vector_db_id="prices", query="What is X?", params={"max_chunks": 2}
    )


@pytest.mark.asyncio
async def test_vector_io_retriever_connection_error(mocker: MockerFixture) -> None:
    """Test that failed query is reported as retrieval error."""
    client = mocker.AsyncMock()
    client.vector_io.query.side_effect = APIConnectionError(request=None)  # type: ignore
    retriever = VectorIORetriever(client, "prices")

    with pytest.raises(RetrievalError, match="vector database prices"):
        await retriever.invoke("What is X?")


def test_get_vector_io_retriever(mocker: MockerFixture) -> None:
    """Test vector IO retriever built from configuration."""
    client = mocker.AsyncMock()
    config = RetrieverConfiguration(type="vector_io", vector_db_id="prices", max_chunks=3)

    retriever = get_retriever(config, client)

    assert isinstance(retriever, VectorIORetriever)
    assert retriever.client is client
    assert retriever.vector_db_id == "prices"
    assert retriever.max_chunks == 3


def test_get_vector_io_retriever_shared_client(mocker: MockerFixture) -> None:
    """Test that shared client is used when none is given."""
    holder = mocker.patch("retrievers.retriever_factory.AsyncLlamaStackClientHolder")
    config = RetrieverConfiguration(type="vector_io", vector_db_id="prices")

    retriever = get_retriever(config)

    assert retriever.client is holder.return_value.get_client.return_value


def test_get_file_retriever(context_file: Path) -> None:
    """Test file retriever built from configuration."""
    retriever = get_retriever(RetrieverConfiguration(type="file", path=context_file))

    assert isinstance(retriever, FileRetriever)
    assert retriever.path == context_file


def test_get_retriever_unknown_type(context_file: Path) -> None:
    """Test that unknown retriever type is rejected."""
    config = RetrieverConfiguration(type="file", path=context_file).model_copy(
        update={"type": "foo"}
    )

    with pytest.raises(RagConfigurationError, match="Unknown retriever type: foo"):
        get_retriever(config)
