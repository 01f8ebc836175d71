"""
In-memory stand-in for IsolatedQueryExecutor.

Interprets the repositories' named queries against plain dicts so services
and routes can be exercised end to end without Neo4j. Tenant injection goes
through the real scoped_parameters(), so a missing tenant fails exactly as it
would in production.
"""
import re
from typing import Any, Dict, List, Optional

from repositories import character_repository as cq
from repositories import moment_repository as mq
from repositories import relationship_repository as rq
from services.graph_executor import scoped_parameters

LIGHTWEIGHT_KEYS = ("id", "tenant_id", "title", "summary", "preview", "timestamp", "created_at", "updated_at")
MOMENT_KEYS = LIGHTWEIGHT_KEYS + ("content",)
OWNERSHIP_LABEL = re.compile(r"MATCH \(n:(\w+) ")


class FakeGraphExecutor:

    def __init__(self):
        self.nodes: Dict[str, Dict[str, Any]] = {}  # id -> {"label": ..., "props": {...}}
        self.edges: List[Dict[str, Any]] = []      # {"type", "src", "dst", "props"}
        self.calls: List[tuple] = []               # (kind, query, scoped params)
        self.connected = True

    # Executor surface ---------------------------------------------------

    async def run_isolated_read(self, query, params, tenant):
        scoped = scoped_parameters(params, tenant)
        self.calls.append(("read", query, scoped))
        return self._dispatch(query, scoped)

    async def run_isolated_write(self, query, params, tenant):
        scoped = scoped_parameters(params, tenant)
        self.calls.append(("write", query, scoped))
        return self._dispatch(query, scoped)

    async def verify_connectivity(self) -> bool:
        return self.connected

    async def initialize_constraints(self):
        pass

    async def close(self):
        pass

    # Helpers ------------------------------------------------------------

    def _node(self, label: str, node_id: str, tenant_id: str) -> Optional[Dict[str, Any]]:
        node = self.nodes.get(node_id)
        if node and node["label"] == label and node["props"]["tenant_id"] == tenant_id:
            return node["props"]
        return None

    def _of_label(self, label: str, tenant_id: str) -> List[Dict[str, Any]]:
        return [
            n["props"] for n in self.nodes.values()
            if n["label"] == label and n["props"]["tenant_id"] == tenant_id
        ]

    def _edges(self, edge_type: str, tenant_id: str, src=None, dst=None) -> List[Dict[str, Any]]:
        return [
            e for e in self.edges
            if e["type"] == edge_type
            and e["props"]["tenant_id"] == tenant_id
            and (src is None or e["src"] == src)
            and (dst is None or e["dst"] == dst)
        ]

    def _remove_edges(self, edges: List[Dict[str, Any]]) -> int:
        for edge in edges:
            self.edges.remove(edge)
        return len(edges)

    def _create(self, label: str, keys, p: Dict[str, Any]) -> Dict[str, Any]:
        props = {k: p.get(k) for k in keys}
        self.nodes[props["id"]] = {"label": label, "props": props}
        return dict(props)

    def _reaches(self, start: str, target: str, tenant_id: str) -> bool:
        seen = set()
        frontier = [start]
        while frontier:
            current = frontier.pop()
            for edge in self._edges("AFTER", tenant_id, src=current):
                if edge["dst"] == target:
                    return True
                if edge["dst"] not in seen:
                    seen.add(edge["dst"])
                    frontier.append(edge["dst"])
        return False

    # Query interpretation ----------------------------------------------

    def _dispatch(self, query: str, p: Dict[str, Any]) -> List[Dict[str, Any]]:
        t = p["tenant_id"]

        if "AS matches" in query:
            label = OWNERSHIP_LABEL.search(query).group(1)
            return [{"matches": 1 if self._node(label, p["entity_id"], t) else 0}]

        # Moments
        if query == mq.CREATE_MOMENT:
            return [{"m": self._create("Moment", MOMENT_KEYS, p)}]

        if query == mq.GET_MOMENT_FULL:
            m = self._node("Moment", p["id"], t)
            if m is None:
                return []
            characters = [
                {"id": e["src"], "name": self.nodes[e["src"]]["props"]["name"]}
                for e in self._edges("PARTICIPATED_IN", t, dst=m["id"])
            ] or [{"id": None, "name": None}]
            locations = [
                {"id": e["dst"], "name": self.nodes[e["dst"]]["props"]["name"]}
                for e in self._edges("OCCURRED_AT", t, src=m["id"])
            ] or [{"id": None, "name": None}]
            return [{"m": dict(m), "characters": characters, "locations": locations}]

        if query == mq.GET_MOMENT_LIGHTWEIGHT:
            m = self._node("Moment", p["id"], t)
            return [{"moment": {k: m[k] for k in LIGHTWEIGHT_KEYS}}] if m else []

        if query == mq.LIST_MOMENTS:
            moments = sorted(self._of_label("Moment", t), key=lambda m: m["id"])
            moments = sorted(moments, key=lambda m: m["created_at"], reverse=True)
            window = moments[p["skip"]:p["skip"] + p["limit"]]
            return [{"moment": {k: m[k] for k in LIGHTWEIGHT_KEYS}} for m in window]

        if "SET m." in query:
            m = self._node("Moment", p["id"], t)
            if m is None:
                return []
            for key, value in p.items():
                if key.startswith("set_"):
                    m[key[len("set_"):]] = value
            return [{"m": dict(m)}]

        if query == mq.DELETE_MOMENT:
            m = self._node("Moment", p["id"], t)
            if m is None:
                return [{"deleted": 0}]
            self._remove_edges([e for e in self.edges if m["id"] in (e["src"], e["dst"])])
            del self.nodes[m["id"]]
            return [{"deleted": 1}]

        if query == mq.TIMELINE_ROWS:
            return [
                {
                    "moment": {k: m[k] for k in LIGHTWEIGHT_KEYS},
                    "next_ids": [e["dst"] for e in self._edges("AFTER", t, src=m["id"])],
                }
                for m in self._of_label("Moment", t)
            ]

        # Characters / Locations
        if query == cq.CREATE_CHARACTER:
            return [{"c": self._create("Character", ("id", "tenant_id", "name", "created_at", "updated_at"), p)}]

        if query == cq.GET_CHARACTER:
            c = self._node("Character", p["id"], t)
            if c is None:
                return []
            relationships = [
                {
                    "source_id": c["id"],
                    "target_id": e["dst"],
                    "target_name": self.nodes[e["dst"]]["props"]["name"],
                    **e["props"],
                }
                for e in self._edges("KNOWS", t, src=c["id"])
            ]
            return [{"c": dict(c), "relationships": relationships}]

        if query == cq.LIST_CHARACTERS:
            rows = sorted(self._of_label("Character", t), key=lambda c: (c["name"], c["id"]))
            return [{"c": dict(c)} for c in rows]

        if query == cq.CREATE_LOCATION:
            return [{"l": self._create("Location", ("id", "tenant_id", "name", "created_at", "updated_at"), p)}]

        if query == cq.GET_LOCATION:
            l = self._node("Location", p["id"], t)
            return [{"l": dict(l)}] if l else []

        if query == cq.LIST_LOCATIONS:
            rows = sorted(self._of_label("Location", t), key=lambda l: (l["name"], l["id"]))
            return [{"l": dict(l)} for l in rows]

        # Edges
        if query == rq.LINK_CHARACTER:
            c = self._node("Character", p["character_id"], t)
            m = self._node("Moment", p["moment_id"], t)
            if not (c and m):
                return []
            if not self._edges("PARTICIPATED_IN", t, src=c["id"], dst=m["id"]):
                self.edges.append({"type": "PARTICIPATED_IN", "src": c["id"], "dst": m["id"],
                                   "props": {"tenant_id": t, "created_at": p["created_at"]}})
            return [{"character_id": c["id"], "moment_id": m["id"]}]

        if query == rq.UNLINK_CHARACTER:
            removed = self._remove_edges(self._edges("PARTICIPATED_IN", t, src=p["character_id"], dst=p["moment_id"]))
            return [{"removed": removed}]

        if query == rq.LINK_LOCATION:
            m = self._node("Moment", p["moment_id"], t)
            l = self._node("Location", p["location_id"], t)
            if not (m and l):
                return []
            if not self._edges("OCCURRED_AT", t, src=m["id"], dst=l["id"]):
                self.edges.append({"type": "OCCURRED_AT", "src": m["id"], "dst": l["id"],
                                   "props": {"tenant_id": t, "created_at": p["created_at"]}})
            return [{"moment_id": m["id"], "location_id": l["id"]}]

        if query == rq.UNLINK_LOCATION:
            removed = self._remove_edges(self._edges("OCCURRED_AT", t, src=p["moment_id"], dst=p["location_id"]))
            return [{"removed": removed}]

        if query == rq.LINK_NEXT:
            a = self._node("Moment", p["moment_id"], t)
            b = self._node("Moment", p["next_id"], t)
            if not (a and b) or a["id"] == b["id"]:
                return []
            if (self._edges("AFTER", t, src=a["id"]) or self._edges("AFTER", t, dst=b["id"])
                    or self._reaches(b["id"], a["id"], t)):
                return []
            self.edges.append({"type": "AFTER", "src": a["id"], "dst": b["id"],
                               "props": {"tenant_id": t, "created_at": p["created_at"]}})
            return [{"moment_id": a["id"], "next_id": b["id"]}]

        if query == rq.UNLINK_NEXT:
            return [{"removed": self._remove_edges(self._edges("AFTER", t, src=p["moment_id"]))}]

        if query == rq.CREATE_KNOWS:
            a = self._node("Character", p["source_id"], t)
            b = self._node("Character", p["target_id"], t)
            if not (a and b):
                return []
            props = {
                "tenant_id": t,
                "relationship_type": p["relationship_type"],
                "context": p["context"],
                "since": p["since"],
            }
            self.edges.append({"type": "KNOWS", "src": a["id"], "dst": b["id"], "props": props})
            return [{"source_id": a["id"], "target_id": b["id"], "target_name": b["name"], **props}]

        if query == rq.PURGE_TENANT:
            owned = [node_id for node_id, n in self.nodes.items() if n["props"]["tenant_id"] == t]
            self._remove_edges([e for e in self.edges if e["src"] in owned or e["dst"] in owned])
            for node_id in owned:
                del self.nodes[node_id]
            return [{"deleted": len(owned)}]

        raise AssertionError(f"Unexpected query: {query.strip().splitlines()[0]}")
