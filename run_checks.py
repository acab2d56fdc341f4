import os

os.environ.setdefault("USE_MOCK_DB", "true")

from fastapi.testclient import TestClient
from pawtriage.main import app

client = TestClient(app)

print('ROOT:')
print(client.get('/').json())

print('\nHEALTH:')
print(client.get('/health').json())

print('\nDB HEALTH:')
resp = client.get('/health/db')
print(resp.status_code, resp.json())

print('\nSUGGESTIONS:')
resp = client.post('/suggestions', json={"severity": "Severe", "rabies_concern": True})
print(resp.status_code)
for suggestion in resp.json().get('suggestions', []):
    print(f"  [{suggestion['priority']}] {suggestion['title']}")

print('\nESCALATION RUN:')
resp = client.post('/triage/escalations/run')
print(resp.status_code, resp.json())
