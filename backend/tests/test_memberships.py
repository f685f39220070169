from portal.services.membership_service import verify_membership

API = "/api/v1"


def _membership(**overrides):
    data = {
        "name": "Lata Deshmukh",
        "email": "Lata@Gmail.com",
        "phone": "9876543210",
        "district": "Thane",
        "state": "Maharashtra",
        "utr": "UTR1234567890",
    }
    data.update(overrides)
    return data


class TestMembershipApplication:
    def test_apply(self, client, store):
        r = client.post(f"{API}/memberships", json=_membership())
        assert r.status_code == 201
        membership = store.get("memberships", r.json()["membershipId"])
        assert membership["status"] == "pending"
        assert "submittedAt" in membership

    def test_missing_utr(self, client, store):
        r = client.post(f"{API}/memberships", json=_membership(utr=""))
        assert r.status_code == 422
        assert "utr" in r.json()["errors"]
        assert store.count("memberships") == 0

    def test_admin_listing_sees_new_application(self, client):
        assert client.get(f"{API}/admin/memberships").json() == []
        client.post(f"{API}/memberships", json=_membership())
        assert len(client.get(f"{API}/admin/memberships").json()) == 1


class TestVerification:
    def _apply(self, client, **overrides):
        return client.post(f"{API}/memberships", json=_membership(**overrides)).json()["membershipId"]

    def test_verify_creates_login(self, client, store, identities):
        membership_id = self._apply(client)
        r = client.post(f"{API}/admin/memberships/{membership_id}/verify")
        assert r.status_code == 200
        assert r.json() == {
            "success": True,
            "message": "Membership verified and user created.",
            "status": "verified",
        }
        assert store.get("memberships", membership_id)["status"] == "verified"
        assert identities.authenticate("lata@gmail.com", "9876543210") is not None
        assert identities.authenticate("lata@gmail.com", "wrong-pass") is None

    def test_verify_twice_is_harmless(self, client, store, identities, session_factory):
        membership_id = self._apply(client)
        client.post(f"{API}/admin/memberships/{membership_id}/verify")
        first_verified_at = store.get("memberships", membership_id)["verifiedAt"]

        r = client.post(f"{API}/admin/memberships/{membership_id}/verify")
        assert r.status_code == 200
        assert r.json()["message"] == "User already exists. Membership marked as verified."
        assert store.get("memberships", membership_id)["verifiedAt"] == first_verified_at

        from portal.models.identity import Identity

        db = session_factory()
        try:
            assert db.query(Identity).count() == 1
        finally:
            db.close()

    def test_existing_login_still_verifies(self, store, identities):
        identities.create_account("lata@gmail.com", "other-password")
        membership_id = store.add("memberships", {**_membership(email="lata@gmail.com"), "status": "pending"})

        result = verify_membership(store, identities, membership_id)
        assert result.success is True
        assert store.get("memberships", membership_id)["status"] == "verified"

    def test_short_phone_cannot_be_password(self, store, identities, monkeypatch):
        from portal.config import settings

        monkeypatch.setattr(settings, "min_password_length", 12)
        membership_id = store.add("memberships", {**_membership(), "status": "pending"})

        result = verify_membership(store, identities, membership_id)
        assert result.success is False
        assert store.get("memberships", membership_id)["status"] == "pending"

    def test_unknown_membership(self, client):
        r = client.post(f"{API}/admin/memberships/missing/verify")
        assert r.status_code == 404
        assert r.json()["message"] == "Membership application not found."
