"""
Скрипт для генерации и очистки dummy данных

    python manage_dummy_data.py generate --posts 100
    python manage_dummy_data.py cleanup
"""
import argparse
import asyncio
import logging

from database.db import async_session_factory
from database.dummy import cleanup_dummy_data, generate_dummy_data
from database.migrations import create_tables

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

async def main(args):
    await create_tables()
    async with async_session_factory() as session:
        if args.command == "generate":
            counts = await generate_dummy_data(session, posts=args.posts, max_comments=args.max_comments)
        else:
            counts = await cleanup_dummy_data(session)
    logger.info(f"Готово: {counts}")

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Dummy данные доски объявлений")
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("generate", help="Создать dummy посты и комментарии")
    generate.add_argument("--posts", type=int, default=100)
    generate.add_argument("--max-comments", type=int, default=3)

    subparsers.add_parser("cleanup", help="Удалить все dummy данные")

    asyncio.run(main(parser.parse_args()))
