import pytest

from app.errors import ValidationError
from app.repositories import CommentRepository, IssueRepository


@pytest.mark.asyncio
async def test_create_and_list_comments(db_session, make_issue):
    issue_id = await IssueRepository(db_session).create(make_issue())
    repo = CommentRepository(db_session)

    first = await repo.create(issue_id, "Crew dispatched", "Public Works")
    second = await repo.create(issue_id, "Still there this morning")

    comments = await repo.list_by_issue(issue_id)

    assert [comment.id for comment in comments] == [second, first]
    assert comments[0].author == "Anonymous"
    assert comments[1].author == "Public Works"
    assert comments[1].comment == "Crew dispatched"
    assert comments[1].issue_id == issue_id


@pytest.mark.asyncio
@pytest.mark.parametrize("author", [None, "", "   "])
async def test_missing_author_defaults_to_anonymous(db_session, author):
    repo = CommentRepository(db_session)

    await repo.create(1, "Noted", author)

    (comment,) = await repo.list_by_issue(1)
    assert comment.author == "Anonymous"


@pytest.mark.asyncio
@pytest.mark.parametrize("text", [None, "", "   \n\t"])
async def test_empty_comment_rejected(db_session, text):
    repo = CommentRepository(db_session)

    with pytest.raises(ValidationError, match="Comment is required"):
        await repo.create(1, text)

    assert await repo.list_by_issue(1) == []


@pytest.mark.asyncio
async def test_comments_scoped_to_issue(db_session, make_issue):
    issues = IssueRepository(db_session)
    first_issue = await issues.create(make_issue())
    second_issue = await issues.create(make_issue())
    repo = CommentRepository(db_session)

    await repo.create(first_issue, "On the first")

    assert len(await repo.list_by_issue(first_issue)) == 1
    assert await repo.list_by_issue(second_issue) == []


@pytest.mark.asyncio
async def test_comment_on_unknown_issue_is_accepted(db_session):
    repo = CommentRepository(db_session)

    comment_id = await repo.create(4242, "Orphaned")

    (comment,) = await repo.list_by_issue(4242)
    assert comment.id == comment_id
