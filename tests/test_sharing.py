"""Tests for granting, updating and revoking note shares."""

import pytest
from sqlmodel import select

from onlynote.core.errors import GranteeNotFound, NoNoteToShare, SelfShare
from onlynote.models.note_share import NoteShare, ShareRole

LINE = [{"points": [[0, 0], [1, 1]]}]


@pytest.fixture()
def alice(resolver, make_profile):
    owner = make_profile("alice@example.com")
    resolver.create(owner, LINE)
    return owner


def test_resharing_updates_role_instead_of_duplicating(alice, sharing, store, make_profile):
    bob = make_profile("bob@example.com")

    sharing.share(alice, "bob@example.com", ShareRole.READER)
    sharing.share(alice, "bob@example.com", ShareRole.WRITER)

    rows = store.db.exec(select(NoteShare).where(NoteShare.shared_with == bob.id)).all()
    assert len(rows) == 1
    assert rows[0].role == ShareRole.WRITER


def test_same_share_twice_is_a_no_op(alice, sharing, make_profile):
    make_profile("bob@example.com")

    first, _ = sharing.share(alice, "bob@example.com", ShareRole.READER)
    first_updated = first.updated_at
    second, _ = sharing.share(alice, "bob@example.com", ShareRole.READER)

    assert second.updated_at == first_updated
    assert len(sharing.list_shares(alice)) == 1


def test_grantee_lookup_ignores_email_case(alice, sharing, make_profile):
    bob = make_profile("bob@example.com")
    grant, grantee = sharing.share(alice, "  Bob@Example.com ", "reader")
    assert grant.shared_with == bob.id
    assert grantee.id == bob.id
    assert grantee.email == "bob@example.com"
    assert grant.role == ShareRole.READER


def test_unknown_grantee(alice, sharing):
    with pytest.raises(GranteeNotFound):
        sharing.share(alice, "nobody@example.com", ShareRole.READER)


def test_owner_without_note_cannot_share(sharing, make_profile):
    erin = make_profile("erin@example.com")
    make_profile("bob@example.com")
    with pytest.raises(NoNoteToShare):
        sharing.share(erin, "bob@example.com", ShareRole.READER)


def test_sharing_with_yourself_is_refused(alice, sharing):
    with pytest.raises(SelfShare):
        sharing.share(alice, "alice@example.com", ShareRole.WRITER)


def test_revoke_removes_access(alice, sharing, resolver, make_profile):
    bob = make_profile("bob@example.com")
    sharing.share(alice, "bob@example.com", ShareRole.READER)

    assert sharing.revoke(alice, "bob@example.com") is True
    assert sharing.revoke(alice, "bob@example.com") is False
    assert resolver.resolve(bob).paths is None


def test_list_shares_pairs_grant_with_grantee(alice, sharing, make_profile):
    make_profile("bob@example.com")
    make_profile("carol@example.com")
    sharing.share(alice, "bob@example.com", ShareRole.READER)
    sharing.share(alice, "carol@example.com", ShareRole.WRITER)

    listed = {grantee.email: grant.role for grant, grantee in sharing.list_shares(alice)}

    assert listed == {"bob@example.com": ShareRole.READER, "carol@example.com": ShareRole.WRITER}
