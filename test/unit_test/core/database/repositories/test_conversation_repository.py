"""Tests for the conversation and message repositories."""

from travel_buddy.core.database.entities.conversations import Message
from travel_buddy.core.database.repositories.conversations import ConversationRepository, MessageRepository


async def test_create_with_participants_deduplicates(session, user_factory):
    alice, bob = await user_factory(), await user_factory()
    repo = ConversationRepository(session)

    conversation = await repo.create_with_participants([alice.id, bob.id, alice.id])

    assert await repo.participant_ids(conversation.id) == [alice.id, bob.id]
    assert await repo.is_participant(conversation.id, bob.id) is True


async def test_find_direct_needs_exactly_the_pair(session, user_factory):
    alice, bob, carol = await user_factory(), await user_factory(), await user_factory()
    repo = ConversationRepository(session)
    trio = await repo.create_with_participants([alice.id, bob.id, carol.id])

    assert await repo.find_direct(alice.id, bob.id) is None

    direct = await repo.create_with_participants([bob.id, alice.id])
    found = await repo.find_direct(alice.id, bob.id)
    assert found.id == direct.id
    assert found.id != trio.id


async def test_touch_moves_conversation_to_the_top(session, user_factory):
    alice, bob, carol = await user_factory(), await user_factory(), await user_factory()
    repo = ConversationRepository(session)
    messages = MessageRepository(session)
    older = await repo.create_with_participants([alice.id, bob.id])
    newer = await repo.create_with_participants([alice.id, carol.id])

    message = await messages.create(Message(conversation_id=older.id, sender_id=bob.id, content="ping"))
    await repo.touch(older, message.id)

    listed = await repo.list_for_user(alice.id)
    assert [c.id for c in listed] == [older.id, newer.id]
    assert listed[0].last_message_id == message.id


async def test_messages_are_paged_newest_first(session, user_factory):
    alice, bob = await user_factory(), await user_factory()
    conversation = await ConversationRepository(session).create_with_participants([alice.id, bob.id])
    messages = MessageRepository(session)
    created = [
        await messages.create(Message(conversation_id=conversation.id, sender_id=alice.id, content=str(n)))
        for n in range(3)
    ]

    first_page = await messages.list_for_conversation(conversation.id, limit=2)
    second_page = await messages.list_for_conversation(conversation.id, limit=2, offset=2)

    assert [m.content for m in first_page] == ["2", "1"]
    assert [m.content for m in second_page] == ["0"]
    assert {m.id for m in await messages.get_many([created[0].id, None])} == {created[0].id}


async def test_delete_removes_messages(session, user_factory):
    alice, bob = await user_factory(), await user_factory()
    repo = ConversationRepository(session)
    messages = MessageRepository(session)
    conversation = await repo.create_with_participants([alice.id, bob.id])
    await messages.create(Message(conversation_id=conversation.id, sender_id=alice.id, content="bye"))

    assert await repo.delete(conversation.id) is True

    assert await messages.list_for_conversation(conversation.id) == []
    assert await repo.participant_ids(conversation.id) == []
