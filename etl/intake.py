"""Document intake - read submitted files into Documents."""
import logging
import mimetypes
from pathlib import Path
from typing import Iterable, List

from etl.extractor import DocumentExtractor
from pipeline.models import Document

logger = logging.getLogger(__name__)


def collect_paths(paths: Iterable[str]) -> List[Path]:
    """Expand directories into their supported files.

    Directories are scanned non-recursively in name order; files given
    explicitly are kept in the order given, whatever their extension.
    """
    collected = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            for child in sorted(path.iterdir()):
                if child.is_file() and child.suffix.lower() in DocumentExtractor.SUPPORTED_FORMATS:
                    collected.append(child)
        elif path.is_file():
            collected.append(path)
        else:
            logger.warning(f"Skipping missing path: {raw}")
    return collected


def load_document(path: Path) -> Document:
    """Read one file into a Document with a fresh id."""
    with open(path, 'rb') as f:
        data = f.read()
    mime_type, _ = mimetypes.guess_type(path.name)
    return Document(name=path.name, data=data, mime_type=mime_type)


def load_documents(paths: Iterable[str]) -> List[Document]:
    documents = [load_document(path) for path in collect_paths(paths)]
    logger.info(f"Loaded {len(documents)} documents")
    return documents
