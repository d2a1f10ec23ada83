"""Create database schema and seed a demo call for development."""
from __future__ import annotations

import asyncio

from calltoken.db.session import SessionLocal, engine
from calltoken.models.base import Base
from calltoken.models.call import CallParticipant, CallSession
from calltoken.models.team import TeamMember

TEAM_ID = "6f1c2a9e-0000-4000-8000-000000000001"

MEMBERS = [
	{"user_id": "3b2d7c41-8f6a-4e15-9c3d-2a7b9e10f001", "is_admin": True},
	{"user_id": "a91e44d0-5c2b-4f7e-8d19-6b3c2e10f002", "is_admin": False},
]

CALLS = [
	{
		"id": "c0ffee00-1111-4222-8333-444455556666",
		"agora_channel_name": "team-demo-standup",
		"call_type": "group_video",
		"status": "connecting",
		"participants": [member["user_id"] for member in MEMBERS],
	},
]


async def create_schema() -> None:
	"""Create the database schema if it does not already exist."""

	async with engine.begin() as conn:
		await conn.run_sync(Base.metadata.create_all)


async def seed_team() -> None:
	"""Insert demo team memberships."""

	async with SessionLocal() as session:
		async with session.begin():
			for member in MEMBERS:
				existing = await session.get(TeamMember, member["user_id"])
				if existing is None:
					session.add(
						TeamMember(
							id=member["user_id"],
							team_id=TEAM_ID,
							user_id=member["user_id"],
							is_admin=member["is_admin"],
						)
					)


async def seed_calls() -> None:
	"""Insert or reset demo call sessions and their participants."""

	async with SessionLocal() as session:
		async with session.begin():
			for call_data in CALLS:
				call = await session.get(CallSession, call_data["id"])
				if call is None:
					call = CallSession(
						id=call_data["id"],
						team_id=TEAM_ID,
						call_type=call_data["call_type"],
						status=call_data["status"],
						initiator_id=call_data["participants"][0],
						agora_channel_name=call_data["agora_channel_name"],
					)
					session.add(call)
					await session.flush()
				else:
					call.status = call_data["status"]
					call.ended_at = None
					call.token_expires_at = None

				for user_id in call_data["participants"]:
					participant_id = f"{call_data['id'][:24]}{user_id[-12:]}"
					if await session.get(CallParticipant, participant_id) is None:
						session.add(
							CallParticipant(id=participant_id, call_session_id=call.id, user_id=user_id)
						)


async def main() -> None:
	await create_schema()
	await seed_team()
	await seed_calls()
	print("Database schema ensured and demo call seeded.")


if __name__ == "__main__":
	asyncio.run(main())
