"""Loads the markdown corpus from a GitHub repository."""
import logging
from typing import Iterator, List, Optional

import httpx

from config import CORPUS_REPO, CORPUS_BRANCH
from models.document import Document

logger = logging.getLogger(__name__)


class DocumentLoader:
    """Lists and downloads the markdown files of a GitHub repository."""

    api_url = "https://api.github.com"
    raw_url = "https://raw.githubusercontent.com"
    web_url = "https://github.com"

    def __init__(
        self,
        repo: str = CORPUS_REPO,
        branch: str = CORPUS_BRANCH,
        github_token: Optional[str] = None,
        timeout: float = 30.0,
    ):
        """
        Initialize DocumentLoader.

        Args:
            repo: "owner/name" of the corpus repository
            branch: Branch to read
            github_token: Optional token to lift the anonymous API rate limit
            timeout: Request timeout in seconds
        """
        self.repo = repo
        self.branch = branch
        self.github_token = github_token
        self.timeout = timeout

    def list_markdown_paths(self, client: httpx.Client) -> List[str]:
        """Paths of every .md file in the repository tree."""
        response = client.get(
            f"{self.api_url}/repos/{self.repo}/git/trees/{self.branch}",
            params={"recursive": "1"},
        )
        response.raise_for_status()
        tree = response.json().get("tree", [])
        paths = sorted(entry["path"] for entry in tree if entry.get("path", "").endswith(".md"))
        logger.info(f"Found {len(paths)} markdown files in {self.repo}")
        return paths

    def iter_documents(self) -> Iterator[Document]:
        """
        Yield documents one at a time, downloading each lazily.

        Raises:
            httpx.HTTPError: On any listing or download failure; an ingestion
                run must not continue with a partial corpus
        """
        headers = {"Accept": "application/vnd.github+json"}
        if self.github_token:
            headers["Authorization"] = f"Bearer {self.github_token}"

        with httpx.Client(timeout=self.timeout, headers=headers, follow_redirects=True) as client:
            for path in self.list_markdown_paths(client):
                response = client.get(f"{self.raw_url}/{self.repo}/{self.branch}/{path}")
                response.raise_for_status()
                yield self.build_document(path, response.text)

    def build_document(self, path: str, content: str) -> Document:
        return Document(
            path=path,
            title=path.split("/")[-1] or path,
            content=content,
            url=f"{self.web_url}/{self.repo}/blob/{self.branch}/{path}",
        )
