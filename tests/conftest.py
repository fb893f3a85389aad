"""Shared pytest fixtures: throwaway git repositories and a wired test client."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from git import Actor, Repo

from app.core.config import Settings, get_settings

AUTHOR = Actor("Test Author", "author@example.com")


class RepoBuilder:
    """Small helper around a GitPython repo for writing, staging and committing."""

    def __init__(self, path: Path):
        self.path = path
        self.repo = Repo.init(path)
        with self.repo.config_writer() as config:
            config.set_value("user", "name", AUTHOR.name)
            config.set_value("user", "email", AUTHOR.email)

    def write(self, rel_path: str, content) -> Path:
        target = self.path / rel_path
        target.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            target.write_bytes(content)
        else:
            target.write_text(content, encoding="utf-8", newline="")
        return target

    def delete(self, rel_path: str) -> None:
        (self.path / rel_path).unlink()

    def stage(self, *paths: str) -> None:
        if paths:
            self.repo.git.add("--all", "--", *paths)
        else:
            self.repo.git.add("--all")

    def commit(self, message: str = "commit", files: dict | None = None) -> str:
        for rel_path, content in (files or {}).items():
            self.write(rel_path, content)
        self.stage()
        return self.repo.index.commit(message, author=AUTHOR, committer=AUTHOR).hexsha


@pytest.fixture
def repo_builder(tmp_path: Path) -> RepoBuilder:
    return RepoBuilder(tmp_path / "project")


@pytest.fixture
def settings(repo_builder: RepoBuilder, tmp_path: Path) -> Settings:
    return Settings(
        REPOSITORY_PATH=str(repo_builder.path),
        DB_PATH=str(tmp_path / "reviews.db"),
        LOG_DIR=str(tmp_path / "logs"),
    )


@pytest.fixture
def client(settings: Settings):
    from app.main import app

    app.dependency_overrides[get_settings] = lambda: settings
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
