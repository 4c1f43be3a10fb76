"""
Terminal front-end over the /api/solr proxy.

Type a term and press enter to search, `:n` / `:p` for the next / previous
page, `:q` to quit. Point PROXY_URL at a running server.
"""
import asyncio
import sys

from searchui import config
from searchui.fetcher import HttpTransport, SearchSession


def print_page(session: SearchSession):
    page = session.page
    if page.error:
        print(f"Error: {page.error}")
        return
    if page.no_results:
        print("No documents found.")
        return
    for card in page.cards:
        print(f"[{card.rank}] {card.title}  (boost {card.boost})")
        print(f"    {card.url_label}")
        print(f"    {card.content}")
    if page.cards:
        print(f"-- {page.start + 1}-{page.start + len(page.cards)} of {page.num_found} --")


async def main():
    transport = HttpTransport(config.PROXY_URL)
    session = SearchSession(transport)
    loop = asyncio.get_running_loop()
    try:
        while True:
            line = await loop.run_in_executor(None, sys.stdin.readline)
            if not line:
                break
            line = line.rstrip("\n")
            if line == ":q":
                break
            if line == ":n":
                moved = session.next_page()
            elif line == ":p":
                moved = session.previous_page()
            else:
                session.type(line)
                session.submit()
                moved = True
            if not moved:
                print("(no more pages)")
                continue
            await session.settle()
            print_page(session)
    finally:
        await transport.aclose()


if __name__ == "__main__":
    asyncio.run(main())
