"""Tests for the httpx marketplace gateway, using httpx.MockTransport."""

import asyncio
import json

import httpx
import pytest

from coursecart.domain.exceptions import ApiError, AuthenticationError, NotFoundError
from coursecart.domain.model.purchase import PurchaseStatus
from coursecart.domain.model.value_objects import Money
from coursecart.infrastructure.http.marketplace_client import HttpMarketplaceGateway


def _gateway(handler, token="tok"):
    return HttpMarketplaceGateway(
        "http://api.test",
        token_provider=lambda: token,
        transport=httpx.MockTransport(handler),
    )


def _call(gateway, method, *args):
    async def scenario():
        async with gateway:
            return await getattr(gateway, method)(*args)

    return asyncio.run(scenario())


class TestAuthentication:

    def test_bearer_token_sent(self):
        seen = []

        def handler(request):
            seen.append(request.headers.get("Authorization"))
            return httpx.Response(200, json={"success": True, "count": 2})

        assert _call(_gateway(handler), "fetch_pending_count") == 2
        assert seen == ["Bearer tok"]

    def test_missing_token_skips_network(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json={})

        with pytest.raises(AuthenticationError):
            _call(_gateway(handler, token=None), "fetch_profile")
        assert requests == []

    def test_public_catalog_needs_no_token(self):
        def handler(request):
            assert "Authorization" not in request.headers
            return httpx.Response(200, json={"success": True, "courses": []})

        assert _call(_gateway(handler, token=None), "fetch_all_courses") == []


class TestErrorMapping:

    @pytest.mark.parametrize(
        "status, error_type",
        [(401, AuthenticationError), (403, AuthenticationError), (404, NotFoundError), (500, ApiError)],
    )
    def test_status_codes(self, status, error_type):
        def handler(request):
            return httpx.Response(status, json={"success": False, "message": "nope"})

        with pytest.raises(error_type) as info:
            _call(_gateway(handler), "fetch_course", "c1")
        assert info.value.status_code == status
        assert info.value.message == "nope"

    def test_success_false_with_code(self):
        def handler(request):
            return httpx.Response(
                200,
                json={"success": False, "error": "pending", "code": "PENDING_PURCHASE_EXISTS"},
            )

        with pytest.raises(ApiError) as info:
            _call(_gateway(handler), "purchase_course", "c1")
        assert info.value.code == "PENDING_PURCHASE_EXISTS"
        assert info.value.message == "pending"

    def test_transport_failure(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(ApiError) as info:
            _call(_gateway(handler), "fetch_all_courses")
        assert info.value.is_transport_failure

    def test_non_json_body(self):
        def handler(request):
            return httpx.Response(200, text="<html>")

        with pytest.raises(ApiError):
            _call(_gateway(handler), "fetch_all_courses")


class TestPayloads:

    def test_course_list(self):
        def handler(request):
            assert request.url.path == "/api/course/all"
            return httpx.Response(200, json={
                "success": True,
                "courses": [
                    {
                        "_id": "c1",
                        "courseTitle": "Python",
                        "coursePrice": "100",
                        "discount": 150,
                        "enrolledStudents": ["s1", "s2"],
                        "courseRatings": [{"rating": 4}, {"rating": 5}],
                        "courseContent": [
                            {"chapterTitle": "Intro",
                             "chapterContent": [{"lectureDuration": 30}, {"lectureDuration": "15"}]},
                        ],
                        "educator": {"_id": "e1", "name": "Ada"},
                    },
                    {"courseTitle": "no id"},
                    "garbage",
                ],
            })

        courses = _call(_gateway(handler), "fetch_all_courses")

        assert [c.id for c in courses] == ["c1"]
        course = courses[0]
        assert course.price == Money.of("100")
        assert course.final_price == Money.zero()
        assert course.enrollment_count == 2
        assert course.rating_samples == (4, 5)
        assert course.chapters[0].total_minutes == 45
        assert course.educator_id == "e1"

    def test_cart_checkout_sends_ids(self):
        bodies = []

        def handler(request):
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json={
                "success": True,
                "sessionUrl": "https://pay.test/s",
                "sessionId": "cs_1",
                "totalAmount": 125,
                "courseCount": 2,
            })

        session = _call(_gateway(handler), "purchase_cart", ["c1", "c2"])

        assert bodies == [{"courseIds": ["c1", "c2"]}]
        assert session.session_url == "https://pay.test/s"
        assert session.total_amount == Money.of("125")
        assert session.course_count == 2

    def test_checkout_without_url_fails(self):
        def handler(request):
            return httpx.Response(200, json={"success": True})

        with pytest.raises(ApiError):
            _call(_gateway(handler), "purchase_course", "c1")

    def test_purchases_skip_unknown_status(self):
        def handler(request):
            return httpx.Response(200, json={
                "success": True,
                "purchases": [
                    {"_id": "p1", "courseId": {"_id": "c1"}, "amount": 50, "status": "pending",
                     "createdAt": "2024-05-01T10:00:00Z"},
                    {"_id": "p2", "courseId": "c2", "amount": 20, "status": "weird"},
                ],
            })

        purchases = _call(_gateway(handler), "fetch_purchases")

        assert [p.id for p in purchases] == ["p1"]
        assert purchases[0].course_id == "c1"
        assert purchases[0].status is PurchaseStatus.PENDING
        assert purchases[0].created_at.tzinfo is not None

    def test_dashboard(self):
        def handler(request):
            assert request.method == "PATCH"
            return httpx.Response(200, json={
                "success": True,
                "data": {
                    "totalEarnings": 300,
                    "totalEnrollments": 3,
                    "totalCourses": 1,
                    "publishedCourses": [{
                        "courseId": "c1",
                        "title": "Python",
                        "price": 100,
                        "enrolledStudents": [
                            {"studentId": {"_id": "s1"}, "enrolledAt": "2024-01-01T00:00:00Z"},
                        ],
                        "totalEnrollments": 1,
                    }],
                },
            })

        snapshot = _call(_gateway(handler), "sync_educator_dashboard")

        assert snapshot.total_earnings == Money.of("300")
        assert snapshot.published_courses[0].enrolled_students[0].student_id == "s1"

    def test_toggle_publication(self):
        def handler(request):
            return httpx.Response(200, json={"success": True, "course": {"isPublished": False}})

        assert _call(_gateway(handler), "toggle_publication", "c1") is False
