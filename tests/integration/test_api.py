"""API tests through FastAPI's TestClient against a throwaway repository."""

import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings, get_settings


@pytest.fixture
def staged_repo(repo_builder):
    """A repo with one commit and a staged edit to file.ts."""
    repo_builder.commit(
        "init",
        {"file.ts": "const a = 1;\nconst b = 2;\nconst c = 3;\nconst d = 4;\n", "doc.md": "# Doc\n"},
    )
    repo_builder.write("file.ts", "const a = 1;\nconst b = 2;\nconst c = 3;\nconst d = 4;\nconst e = 5;\n")
    repo_builder.stage()
    return repo_builder


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"


class TestGitRoutes:
    def test_info(self, client, staged_repo):
        body = client.get("/api/git/info").json()
        assert body["name"] == "project"
        assert body["branch"] == staged_repo.repo.active_branch.name
        assert body["remoteUrl"] is None

    def test_commits_and_branches(self, client, staged_repo):
        commits = client.get("/api/git/commits", params={"limit": 5}).json()
        assert [c["message"] for c in commits] == ["init"]
        assert len(commits[0]["shortSha"]) == 7

        branches = client.get("/api/git/branches").json()
        assert [b["current"] for b in branches] == [True]

    def test_staged_flag(self, client, staged_repo):
        assert client.get("/api/git/staged").json() == {"hasStagedChanges": True}

    def test_tree_and_file(self, client, staged_repo):
        assert client.get("/api/git/tree/HEAD").json()["files"] == ["doc.md", "file.ts"]

        body = client.get("/api/git/file/doc.md", params={"ref": "HEAD"}).json()
        assert body["content"] == "# Doc\n"
        assert body["isBinary"] is False

    def test_missing_file(self, client, staged_repo):
        response = client.get("/api/git/file/nope.md")
        assert response.status_code == 404
        assert response.json() == {
            "error": "nope.md does not exist at HEAD",
            "code": "FileNotFoundAtRefError",
        }

    def test_unknown_ref(self, client, staged_repo):
        response = client.get("/api/git/tree/does-not-exist")
        assert response.status_code == 404
        assert response.json()["code"] == "RefResolutionError"


class TestDiffRoutes:
    def test_staged_wire_shape(self, client, staged_repo):
        body = client.get("/api/diff/staged").json()
        assert set(body) == {"files", "summary", "repository"}
        assert body["summary"] == {"totalFiles": 1, "totalAdditions": 1, "totalDeletions": 0}

        (file_diff,) = body["files"]
        assert file_diff["path"] == "file.ts"
        assert file_diff["changeKind"] == "modified"
        assert file_diff["isBinary"] is False
        assert file_diff["lines"][-1] == {
            "type": "added",
            "content": "const e = 5;",
            "oldLineNumber": None,
            "newLineNumber": 5,
        }
        assert file_diff["eolChanged"] is False

    def test_unstaged_empty(self, client, staged_repo):
        assert client.get("/api/diff/unstaged").json()["files"] == []

    def test_refs_missing_head_is_bad_request(self, client, staged_repo):
        response = client.get("/api/diff/refs", params={"base": "HEAD"})
        assert response.status_code == 400
        assert response.json()["code"] == "MalformedComparisonError"

    def test_commits_without_shas_is_bad_request(self, client, staged_repo):
        assert client.get("/api/diff/commits").status_code == 400

    def test_commits(self, client, staged_repo):
        sha = staged_repo.repo.head.commit.hexsha
        body = client.get("/api/diff/commits", params={"sha": [sha]}).json()
        assert [f["changeKind"] for f in body["files"]] == ["added", "added"]


class TestReviewFlow:
    def test_comments_attach_to_current_diff(self, client, staged_repo):
        review = client.post("/api/reviews", json={"sourceType": "staged"}).json()
        assert review["status"] == "in_progress"

        anchored = client.post(
            f"/api/reviews/{review['id']}/comments",
            json={"filePath": "file.ts", "lineNumber": 5, "lineType": "added", "content": "Why e?"},
        ).json()
        stale = client.post(
            f"/api/reviews/{review['id']}/comments",
            json={"filePath": "file.ts", "lineNumber": 9, "lineType": "added", "content": "Old"},
        ).json()
        general = client.post(
            f"/api/reviews/{review['id']}/comments",
            json={"filePath": "file.ts", "content": "Looks fine overall"},
        ).json()

        body = client.get(f"/api/reviews/{review['id']}/diff").json()
        assert list(body["commentsByLine"]) == ["file.ts:5:added"]
        assert [c["id"] for c in body["commentsByLine"]["file.ts:5:added"]] == [anchored["id"]]
        assert body["orphanedCommentIds"] == [stale["id"]]
        assert [c["id"] for c in body["fileComments"]] == [general["id"]]

        # Orphans stay addressable by id
        assert client.get(f"/api/comments/{stale['id']}").status_code == 200

    def test_review_on_unknown_ref_is_rejected(self, client, staged_repo):
        response = client.post(
            "/api/reviews",
            json={"sourceType": "refs", "baseRef": "HEAD", "sourceRef": "missing"},
        )
        assert response.status_code == 404

    def test_review_crud(self, client, staged_repo):
        review = client.post("/api/reviews", json={"sourceType": "unstaged"}).json()
        patched = client.patch(f"/api/reviews/{review['id']}", json={"status": "approved"}).json()
        assert patched["status"] == "approved"

        listing = client.get("/api/reviews", params={"status": "approved"}).json()
        assert listing["total"] == 1 and listing["pageSize"] == 20

        assert client.delete(f"/api/reviews/{review['id']}").json() == {"success": True}
        missing = client.get(f"/api/reviews/{review['id']}")
        assert missing.status_code == 404
        assert missing.json()["code"] == "ReviewNotFoundError"

    def test_comment_lifecycle(self, client, staged_repo):
        review = client.post("/api/reviews", json={"sourceType": "staged"}).json()
        comment = client.post(
            f"/api/reviews/{review['id']}/comments",
            json={"filePath": "file.ts", "lineNumber": 1, "lineType": "context", "content": "x"},
        ).json()
        cid = comment["id"]

        assert client.patch(f"/api/comments/{cid}", json={"content": "y"}).json()["content"] == "y"
        assert client.post(f"/api/comments/{cid}/resolve").json()["resolved"] is True
        stats = client.get(f"/api/reviews/{review['id']}/comments/stats").json()
        assert stats == {"total": 1, "resolved": 1, "unresolved": 0, "withSuggestions": 0}
        assert client.post(f"/api/comments/{cid}/unresolve").json()["resolved"] is False

        by_file = client.get(
            f"/api/reviews/{review['id']}/comments", params={"filePath": "doc.md"}
        ).json()
        assert by_file == []

        assert client.delete(f"/api/comments/{cid}").json() == {"success": True}
        assert client.delete(f"/api/comments/{cid}").status_code == 404

    def test_comment_on_missing_review(self, client, staged_repo):
        response = client.post(
            "/api/reviews/nope/comments", json={"filePath": "a.py", "content": "hi"}
        )
        assert response.status_code == 404

    def test_empty_comment_rejected(self, client, staged_repo):
        review = client.post("/api/reviews", json={"sourceType": "staged"}).json()
        response = client.post(
            f"/api/reviews/{review['id']}/comments", json={"filePath": "a.py", "content": ""}
        )
        assert response.status_code == 422


class TestDefaultDatabaseLocation:
    @pytest.fixture
    def in_repo_client(self, repo_builder, tmp_path):
        settings = Settings(REPOSITORY_PATH=str(repo_builder.path), LOG_DIR=str(tmp_path / "logs"))
        from app.main import app

        app.dependency_overrides[get_settings] = lambda: settings
        with TestClient(app) as test_client:
            yield test_client
        app.dependency_overrides.clear()

    def test_store_is_not_an_untracked_file(self, in_repo_client, repo_builder):
        repo_builder.commit("init", {"a.txt": "a\n"})

        assert in_repo_client.post("/api/reviews", json={"sourceType": "unstaged"}).status_code == 201
        assert (repo_builder.path / ".code-review" / "reviews.db").exists()

        assert in_repo_client.get("/api/diff/unstaged").json()["files"] == []
        assert repo_builder.repo.untracked_files == []


class TestTodoRoutes:
    def test_todo_lifecycle(self, client, staged_repo):
        first = client.post("/api/todos", json={"content": "Check the migration"})
        assert first.status_code == 201
        todo = first.json()
        assert todo["completed"] is False and todo["reviewId"] is None

        toggled = client.post(f"/api/todos/{todo['id']}/toggle").json()
        assert toggled["completed"] is True
        renamed = client.patch(f"/api/todos/{todo['id']}", json={"content": "Check it twice"}).json()
        assert (renamed["content"], renamed["completed"]) == ("Check it twice", True)

        assert client.get("/api/todos/stats").json() == {"total": 1, "completed": 1, "pending": 0}
        assert client.get("/api/todos", params={"completed": "false"}).json() == []

        assert client.delete(f"/api/todos/{todo['id']}").json() == {"success": True}
        missing = client.get(f"/api/todos/{todo['id']}")
        assert missing.status_code == 404
        assert missing.json()["code"] == "TodoNotFoundError"

    def test_review_scoped_todos(self, client, staged_repo):
        review = client.post("/api/reviews", json={"sourceType": "staged"}).json()
        scoped = client.post(
            "/api/todos", json={"content": "Ask about e", "reviewId": review["id"]}
        ).json()
        client.post("/api/todos", json={"content": "Global"})

        listed = client.get("/api/todos", params={"reviewId": review["id"]}).json()
        assert [t["id"] for t in listed] == [scoped["id"]]

        assert client.delete(f"/api/reviews/{review['id']}/todos").json() == {"deleted": 1}
        assert [t["content"] for t in client.get("/api/todos").json()] == ["Global"]

    def test_clear_completed(self, client, staged_repo):
        done = client.post("/api/todos", json={"content": "done"}).json()
        client.post("/api/todos", json={"content": "pending"})
        client.post(f"/api/todos/{done['id']}/toggle")

        assert client.delete("/api/todos/completed").json() == {"deleted": 1}
        assert [t["content"] for t in client.get("/api/todos").json()] == ["pending"]

    def test_todo_for_unknown_review(self, client, staged_repo):
        response = client.post("/api/todos", json={"content": "x", "reviewId": "nope"})
        assert response.status_code == 404
        assert response.json()["code"] == "ReviewNotFoundError"

    def test_empty_todo_rejected(self, client, staged_repo):
        assert client.post("/api/todos", json={"content": ""}).status_code == 422
