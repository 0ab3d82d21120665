"""Database seeder: recreates the tables and loads sample companies and jobs."""
import asyncio
import argparse
import random
import time

from jobly.database import Base, build_engine, build_session_factory
from jobly.services import company_service, job_service
import jobly.models  # noqa: F401  (registers the tables on Base.metadata)

COMPANIES = [
    ("anderson-arias-morrow", "Anderson, Arias and Morrow", "Somebody program how I.", 245),
    ("bauer-gallagher", "Bauer-Gallagher", "Difficult ready trip question produce produce someone.", 862),
    ("netflix", "Netflix", "Streaming video.", 12000),
    ("babynet", "Babynet", "Parenting network.", 18),
    ("sellers-bryant", "Sellers-Bryant", "Language discuss mission soon wrong.", None),
]

TITLES = ["Software Engineer", "Data Analyst", "Product Manager", "Nurse",
          "Accountant", "Designer", "Site Reliability Engineer", "Recruiter"]


async def seed(url: str | None = None, jobs_per_company: int = 3) -> None:
    engine = build_engine(url)
    session_factory = build_session_factory(engine)
    start = time.perf_counter()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    total_jobs = 0
    async with session_factory() as session:
        for handle, name, description, num_employees in COMPANIES:
            await company_service.create_company(session, {
                "handle": handle,
                "name": name,
                "description": description,
                "numEmployees": num_employees,
                "logoUrl": f"/logos/{handle}.png",
            })
            for _ in range(jobs_per_company):
                await job_service.create_job(session, {
                    "title": random.choice(TITLES),
                    "salary": random.randrange(40_000, 200_000, 1_000),
                    "equity": random.choice([None, 0, 0.01, 0.05, 0.1]),
                    "companyHandle": handle,
                })
                total_jobs += 1
        await session.commit()

    await engine.dispose()

    elapsed = time.perf_counter() - start
    print(f"Seeding complete in {elapsed:.1f}s")
    print(f"  Companies: {len(COMPANIES)}")
    print(f"  Jobs: {total_jobs}")


def main():
    parser = argparse.ArgumentParser(description="Seed the Jobly database")
    parser.add_argument("--url", help="Database URL (defaults to DATABASE_URL)")
    parser.add_argument("--jobs-per-company", type=int, default=3, help="Jobs created per company")
    args = parser.parse_args()
    asyncio.run(seed(url=args.url, jobs_per_company=args.jobs_per_company))


if __name__ == "__main__":
    main()
