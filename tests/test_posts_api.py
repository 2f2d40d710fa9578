"""Tests for post routes: create, read, keyset listing and owner-only mutations."""

import unittest
from datetime import UTC, datetime, timedelta

from cms.models import Comment, Post
from tests.helpers import ApiTestCase


class PostsTestCase(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.owner = self.seed_user("owner")
        self.other = self.seed_user("other")

    def seed_post(self, title: str = "Hello", created_at: datetime | None = None, owner=None) -> Post:
        owner = owner or self.owner
        created_at = created_at or datetime.now(UTC)
        db = self.database.session()
        try:
            post = Post(
                user_id=owner.user_id,
                username=owner.username,
                title=title,
                content="Body",
                tags=[],
                status="published",
                comment_count=0,
                created_at=created_at,
                updated_at=created_at,
            )
            db.add(post)
            db.commit()
            return post
        finally:
            db.close()


class TestCreateAndGetPost(PostsTestCase):
    def test_create_post(self) -> None:
        response = self.client.post(
            "/posts",
            json={"title": "First", "content": "Hello world", "tags": ["intro"]},
            headers=self.auth(self.owner),
        )
        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body["message"], "Post created successfully")
        post = body["post"]
        self.assertEqual(post["userId"], self.owner.user_id)
        self.assertEqual(post["username"], "owner")
        self.assertEqual(post["tags"], ["intro"])
        self.assertEqual(post["commentCount"], 0)

        fetched = self.client.get(f"/posts/{post['postId']}")
        self.assertEqual(fetched.status_code, 200)
        self.assertEqual(fetched.json()["post"]["title"], "First")

    def test_create_requires_title_and_content(self) -> None:
        for payload in ({"title": "x"}, {"content": "y"}, {"title": "", "content": "y"}):
            with self.subTest(payload=payload):
                response = self.client.post("/posts", json=payload, headers=self.auth(self.owner))
                self.assertEqual(response.status_code, 400)
                self.assertEqual(response.json(), {"error": "Title and content are required"})

    def test_create_requires_token(self) -> None:
        response = self.client.post("/posts", json={"title": "x", "content": "y"})
        self.assertEqual(response.status_code, 401)

    def test_unknown_post_is_404(self) -> None:
        response = self.client.get("/posts/nope")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"error": "Post not found"})


class TestListPosts(PostsTestCase):
    def test_newest_first_with_cursor(self) -> None:
        start = datetime(2026, 1, 1, tzinfo=UTC)
        for i in range(5):
            self.seed_post(f"post-{i}", created_at=start + timedelta(minutes=i))

        first = self.client.get("/posts", params={"limit": 2}).json()
        self.assertEqual([p["title"] for p in first["posts"]], ["post-4", "post-3"])
        self.assertIsNotNone(first["lastKey"])

        second = self.client.get("/posts", params={"limit": 2, "lastKey": first["lastKey"]}).json()
        self.assertEqual([p["title"] for p in second["posts"]], ["post-2", "post-1"])

        third = self.client.get("/posts", params={"limit": 2, "lastKey": second["lastKey"]}).json()
        self.assertEqual([p["title"] for p in third["posts"]], ["post-0"])
        self.assertIsNone(third["lastKey"])

    def test_invalid_cursor_starts_over(self) -> None:
        self.seed_post("only")
        body = self.client.get("/posts", params={"lastKey": "%%%garbage"}).json()
        self.assertEqual([p["title"] for p in body["posts"]], ["only"])

    def test_empty_list(self) -> None:
        self.assertEqual(self.client.get("/posts").json(), {"posts": [], "lastKey": None})


class TestUpdatePost(PostsTestCase):
    def test_owner_updates_fields(self) -> None:
        post = self.seed_post()
        response = self.client.put(
            f"/posts/{post.post_id}", json={"title": "Edited"}, headers=self.auth(self.owner)
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["post"]["title"], "Edited")
        self.assertEqual(response.json()["post"]["content"], "Body")

    def test_non_owner_is_403(self) -> None:
        post = self.seed_post()
        response = self.client.put(
            f"/posts/{post.post_id}", json={"title": "Hijack"}, headers=self.auth(self.other)
        )
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json(), {"error": "Forbidden: You can only update your own posts"})

    def test_admin_role_grants_no_override(self) -> None:
        admin = self.seed_user("boss", role="admin")
        post = self.seed_post()
        response = self.client.put(f"/posts/{post.post_id}", json={"title": "x"}, headers=self.auth(admin))
        self.assertEqual(response.status_code, 403)

    def test_existence_is_checked_before_ownership(self) -> None:
        response = self.client.put("/posts/nope", json={"title": "x"}, headers=self.auth(self.other))
        self.assertEqual(response.status_code, 404)

    def test_empty_update_is_400(self) -> None:
        post = self.seed_post()
        response = self.client.put(f"/posts/{post.post_id}", json={}, headers=self.auth(self.owner))
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "No fields to update"})


class TestDeletePost(PostsTestCase):
    def test_owner_deletes_post_and_comments(self) -> None:
        post = self.seed_post()
        self.client.post(
            f"/posts/{post.post_id}/comments", json={"content": "hi"}, headers=self.auth(self.other)
        )
        response = self.client.delete(f"/posts/{post.post_id}", headers=self.auth(self.owner))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json(),
            {"message": "Post and associated comments deleted successfully", "postId": post.post_id},
        )
        db = self.database.session()
        try:
            self.assertIsNone(db.get(Post, post.post_id))
            self.assertEqual(db.query(Comment).filter(Comment.post_id == post.post_id).count(), 0)
        finally:
            db.close()

    def test_non_owner_cannot_delete(self) -> None:
        post = self.seed_post()
        response = self.client.delete(f"/posts/{post.post_id}", headers=self.auth(self.other))
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json(), {"error": "Forbidden: You can only delete your own posts"})
        self.assertEqual(self.client.get(f"/posts/{post.post_id}").status_code, 200)


if __name__ == "__main__":
    unittest.main()
