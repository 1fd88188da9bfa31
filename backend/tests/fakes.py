"""In-memory stand-ins for the motor client, database, collection and cursor"""
import asyncio


class FakeCursor:
    def __init__(self, docs, delay=0.0, error=None):
        self._docs = list(docs)
        self._delay = delay
        self._error = error

    def sort(self, key, direction):
        # Mongo compares stored values; strings sort lexicographically
        self._docs.sort(key=lambda d: str(d.get(key, "")), reverse=direction < 0)
        return self

    def max_time_ms(self, ms):
        return self

    async def to_list(self, length=None):
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._error is not None:
            raise self._error
        return [dict(d) for d in self._docs]


class FakeCollection:
    def __init__(self, docs, delay=0.0, error=None):
        self.docs = docs
        self.delay = delay
        self.error = error

    def find(self, filter=None, projection=None):
        return FakeCursor(self.docs, self.delay, self.error)

    async def count_documents(self, filter, **kwargs):
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return len(self.docs)


class FakeDatabase:
    def __init__(self, name, collections=None):
        self.name = name
        self.collections = collections or {}
        self.delays = {}
        self.errors = {}
        self.list_delay = 0.0

    def __getitem__(self, name):
        return FakeCollection(
            self.collections.get(name, []),
            delay=self.delays.get(name, 0.0),
            error=self.errors.get(name),
        )

    async def list_collection_names(self, **kwargs):
        if self.list_delay:
            await asyncio.sleep(self.list_delay)
        return list(self.collections)


class FakeAdmin:
    def __init__(self, error=None, delay=0.0):
        self.error = error
        self.delay = delay

    async def command(self, name):
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return {"ok": 1.0}


class FakeClient:
    """Stands in for AsyncIOMotorClient: admin.command, client[db_name], close()"""

    def __init__(self, database, ping_error=None, ping_delay=0.0):
        self.database = database
        self.admin = FakeAdmin(ping_error, ping_delay)
        self.closed = False
        self.kwargs = {}

    def __getitem__(self, name):
        return self.database

    def close(self):
        self.closed = True


class ClientFactory:
    """Records every client the connection asks for"""

    def __init__(self, database, ping_error=None, ping_delay=0.0, construct_error=None):
        self.database = database
        self.ping_error = ping_error
        self.ping_delay = ping_delay
        self.construct_error = construct_error
        self.created = []

    def __call__(self, uri, **kwargs):
        if self.construct_error is not None:
            raise self.construct_error
        client = FakeClient(self.database, self.ping_error, self.ping_delay)
        client.uri = uri
        client.kwargs = kwargs
        self.created.append(client)
        return client


