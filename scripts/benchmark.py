# scripts/benchmark.py
# Needs a reachable Solr at SOLR_URL; issues the same request twice through the proxy.
import time
from fastapi.testclient import TestClient
from searchui.main import app

params = {"q": "mars", "defType": "dismax", "qf": "title content url", "rows": 20, "sort": "boost desc", "start": 0}

def main():
    with TestClient(app) as client:
        t0 = time.time()
        r1 = client.get("/api/solr", params=params)
        first = (time.time() - t0) * 1000

        t1 = time.time()
        r2 = client.get("/api/solr", params=params)
        second = (time.time() - t1) * 1000

        print(f"First:  {first:.1f} ms ({r1.status_code})")
        print(f"Second: {second:.1f} ms ({r2.status_code})")
        print("Identical bodies:", r1.json() == r2.json())

if __name__ == "__main__":
    main()
