import json
from typing import Dict, List, Optional, Tuple


class NoGrafo:
    """Estado desenhado pelo usuário. A identidade é a do objeto, não o rótulo."""
    def __init__(self, label: str, is_start: bool = False, is_final: bool = False,
                 position: Tuple[float, float] = (0, 0)):
        self.label = label
        self.is_start = is_start
        self.is_final = is_final
        self.position = position

    def __repr__(self):
        flags = ("i" if self.is_start else "") + ("f" if self.is_final else "")
        return f"NoGrafo({self.label!r}{', ' + flags if flags else ''})"


class TransicaoGrafo:
    """Aresta dirigida com as condições ainda não interpretadas."""
    def __init__(self, src: NoGrafo, dst: NoGrafo, conditions: Optional[List[str]] = None):
        self.src = src
        self.dst = dst
        self.conditions: List[str] = list(conditions or [])

    def __repr__(self):
        return f"TransicaoGrafo({self.src.label!r} -> {self.dst.label!r}, {self.conditions!r})"


class Grafo:
    """
    Representação crua e mutável do editor: nós e transições na ordem em que
    foram criados. Não conhece semântica de máquina; o motor só lê daqui.
    """
    def __init__(self):
        self.nodes: List[NoGrafo] = []
        self.transitions: List[TransicaoGrafo] = []

    def add_node(self, label: str, is_start=False, is_final=False, position=(0, 0)) -> NoGrafo:
        node = NoGrafo(label, is_start, is_final, position)
        self.nodes.append(node)
        return node

    def add_transition(self, src: NoGrafo, dst: NoGrafo, conditions: Optional[List[str]] = None) -> TransicaoGrafo:
        if not self._owns(src) or not self._owns(dst):
            raise ValueError("Estado inexistente.")
        transition = TransicaoGrafo(src, dst, conditions)
        self.transitions.append(transition)
        return transition

    def remove_node(self, node: NoGrafo):
        """Remove um estado e todas as transições que o tocam."""
        if not self._owns(node):
            return
        self.nodes = [n for n in self.nodes if n is not node]
        self.transitions = [t for t in self.transitions if t.src is not node and t.dst is not node]

    def remove_transition(self, transition: TransicaoGrafo):
        self.transitions = [t for t in self.transitions if t is not transition]

    def rename_node(self, node: NoGrafo, new_label: str):
        if any(n.label == new_label and n is not node for n in self.nodes):
            raise ValueError(f"O nome '{new_label}' já está em uso.")
        node.label = new_label

    def find(self, label: str) -> Optional[NoGrafo]:
        return next((n for n in self.nodes if n.label == label), None)

    def outgoing(self, node: NoGrafo) -> List[TransicaoGrafo]:
        return [t for t in self.transitions if t.src is node]

    def connected(self, src: NoGrafo, dst: NoGrafo) -> bool:
        return any(t.src is src and t.dst is dst for t in self.transitions)

    def find_reverse(self, transition: TransicaoGrafo) -> Optional[TransicaoGrafo]:
        """Transição no sentido oposto (dst -> src), se existir."""
        return next((t for t in self.transitions
                     if t.src is transition.dst and t.dst is transition.src), None)

    def _owns(self, node: NoGrafo) -> bool:
        return any(n is node for n in self.nodes)

    def dump(self) -> List[Dict]:
        """Registros tipados: primeiro os nós, depois as transições."""
        ids: Dict[int, int] = {}
        records = []
        for node in self.nodes:
            ids[id(node)] = len(records)
            records.append({
                "id": len(records),
                "type": "NODE",
                "label": node.label,
                "position": list(node.position),
                "start": node.is_start,
                "end": node.is_final,
            })
        for transition in self.transitions:
            records.append({
                "id": len(records),
                "type": "TRANSITION",
                "from": ids[id(transition.src)],
                "to": ids[id(transition.dst)],
                "conditions": list(transition.conditions),
            })
        return records

    @classmethod
    def load(cls, records: List[Dict]) -> "Grafo":
        """
        Reconstrói o grafo a partir de registros NODE/TRANSITION.
        Uma transição só pode apontar para nós já materializados.
        """
        grafo = cls()
        entities: Dict[int, object] = {}
        for record in records:
            kind = record.get("type")
            if kind == "NODE":
                x, y = record.get("position", (0, 0))
                entities[record["id"]] = grafo.add_node(
                    record.get("label", ""),
                    is_start=bool(record.get("start", record.get("isStart", False))),
                    is_final=bool(record.get("end", record.get("isFinal", False))),
                    position=(x, y),
                )
            elif kind == "TRANSITION":
                src = entities.get(record.get("from", record.get("fromId")))
                dst = entities.get(record.get("to", record.get("toId")))
                if not isinstance(src, NoGrafo) or not isinstance(dst, NoGrafo):
                    raise ValueError("Transições só podem ligar estados a estados.")
                entities[record["id"]] = grafo.add_transition(src, dst, record.get("conditions", []))
            else:
                raise ValueError(f"Tipo de registro desconhecido: {kind!r}")
        return grafo

    def to_json(self) -> str:
        return json.dumps(self.dump(), indent=2, ensure_ascii=False)

    @classmethod
    def from_json(cls, json_str: str) -> "Grafo":
        return cls.load(json.loads(json_str))
