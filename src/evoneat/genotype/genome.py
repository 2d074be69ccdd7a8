"""
NEAT Genome Module

This module implements the Genome class for the NEAT
(NeuroEvolution of Augmenting Topologies) algorithm.

Classes:
    Genome: Complete genome representing a layered feed-forward neural network
"""

import json
import logging
from pathlib import Path

from evoneat                            import rng
from evoneat.activations                import activations
from evoneat.errors                     import CorruptSnapshot, ShapeMismatch
from evoneat.genotype.connection_gene    import ConnectionGene
from evoneat.genotype.innovation_tracker import InnovationTracker
from evoneat.genotype.node_gene          import NodeGene
from evoneat.run.config                  import Config

logger = logging.getLogger(__name__)

class Genome:
    """
    A NEAT genome representing a neural network as a collection of node and connection genes.

    The genome encodes both the structure and the parameters of a layered
    feed-forward network:
    - Node genes: one per neuron, each sitting on a layer (0 = inputs, last = outputs)
    - Connection genes: weighted edges, always from a lower layer to a strictly
      higher one, each carrying a global innovation number used to align genes
      during crossover and speciation

    A new genome has only input and output nodes (plus, optionally, a number
    of hidden layers) and no connections. Via mutation, genomes grow by adding
    nodes and connections; the layer of every node is kept up to date so the
    network can always be evaluated in a single pass over the nodes, ordered
    by layer.

    Node numbering convention:
        - Input nodes:  [0, inputs)
        - Output nodes: [inputs, inputs + outputs)
        - Hidden nodes: [inputs + outputs, ...)

    Public Attributes:
        id:          Random 8-character tag
        inputs:      Number of input nodes
        outputs:     Number of output nodes
        layers:      Number of layers
        next_node:   ID to give to the next node created in this genome
        fitness:     Fitness assigned by the evaluator
        nodes:       Dictionary mapping node IDs to NodeGene objects
        connections: Dictionary mapping innovation numbers to ConnectionGene objects

    Public Properties:
        input_nodes:  List of all input node genes
        output_nodes: List of all output node genes
        hidden_nodes: List of all hidden node genes

    Public Methods:
        feed_forward(inputs):        Run the network on an input vector
        fully_connect(tracker):      Connect every layer to the next one
        add_node(tracker):           Split a connection with a new node
        remove_node():               Remove a hidden node and its connections
        add_connection(tracker):     Connect two unconnected nodes
        remove_connection():         Remove a connection
        mutate(tracker):             Apply all mutation operators stochastically
        crossover(other):            Create offspring with a less fit genome
        clone():                     Deep copy
        is_equal(other):             Structural and parametric equality
        to_dict() / to_json():       Serialize
        save(path):                  Serialize to a JSON file

    Class Methods:
        from_dict(data) / from_json(text) / load(path): Deserialize
    """

    def __init__(self, config: Config, empty: bool = False):
        """
        Initialize a minimal Genome.

        The genome has 'num_inputs' input nodes on layer 0, 'num_outputs' output
        nodes on the last layer and, if 'num_hidden_layers' is set, that many
        hidden layers of 'num_hidden_nodes' nodes each in between. It has no
        connections.

        Parameters:
            config: Stores configuration parameters
            empty:  If True, create no nodes at all (used when the caller
                    fills in the genes itself, e.g. crossover and cloning)
        """
        self._config = config

        self.id       : str   = rng.uid(8)
        self.inputs   : int   = config.num_inputs
        self.outputs  : int   = config.num_outputs
        self.layers   : int   = 2 + config.num_hidden_layers
        self.next_node: int   = 0
        self.fitness  : float = 0.0

        self.nodes      : dict[int, NodeGene]       = {}  # node ID => node gene
        self.connections: dict[int, ConnectionGene] = {}  # innovation number => connection gene

        # Nodes in evaluation order (sorted by layer)
        self._network: list[NodeGene] = []

        if empty:
            return

        # Input nodes, on the first layer
        for i in range(self.inputs):
            self.nodes[i] = NodeGene(i, config.activation_default, 0)

        # Output nodes, on the last layer
        for i in range(self.outputs):
            node_id = self.inputs + i
            self.nodes[node_id] = NodeGene(node_id, config.activation_default, self.layers - 1)
        self.next_node = self.inputs + self.outputs

        # Hidden nodes, if hidden layers were requested
        for layer in range(1, self.layers - 1):
            for _ in range(config.num_hidden_nodes):
                self.nodes[self.next_node] = NodeGene(self.next_node, config.activation_default, layer)
                self.next_node += 1

        self.generate_network()

    @property
    def input_nodes(self) -> list[NodeGene]:
        return [node for node in self.nodes.values() if self._is_input(node.id)]

    @property
    def output_nodes(self) -> list[NodeGene]:
        return [node for node in self.nodes.values() if self._is_output(node.id)]

    @property
    def hidden_nodes(self) -> list[NodeGene]:
        return [node for node in self.nodes.values()
                if not self._is_input(node.id) and not self._is_output(node.id)]

    def _is_input(self, node_id: int) -> bool:
        return node_id < self.inputs

    def _is_output(self, node_id: int) -> bool:
        return self.inputs <= node_id < self.inputs + self.outputs

    def get_node(self, node_id: int) -> NodeGene | None:
        return self.nodes.get(node_id)

    def connect_nodes(self) -> None:
        """
        Rebuild the list of outgoing connections of every node.
        """
        for node in self.nodes.values():
            node.output_connections = []
        for conn in self.connections.values():
            self.nodes[conn.node_in].output_connections.append(conn)

    def generate_network(self) -> None:
        """
        Rebuild the evaluation order: all nodes, sorted by layer.
        Must be called after any change to the structure of the network.
        """
        self.connect_nodes()
        self._network = sorted(self.nodes.values(), key=lambda n: n.layer)

    def feed_forward(self, input_values) -> list[float]:
        """
        Run the network on one input vector.

        Parameters:
            input_values: sequence of 'inputs' real numbers

        Returns:
            list of 'outputs' real numbers, the values of the output nodes

        Raises:
            ShapeMismatch:  if the number of values differs from the number of inputs
            NumericalError: if a node produces NaN
        """
        if len(input_values) != self.inputs:
            raise ShapeMismatch(f"The number of inputs must match the number of input nodes: "
                                f"expected {self.inputs}, got {len(input_values)}")

        # Set the outputs of the input nodes
        for i in range(self.inputs):
            self.nodes[i].output_value = float(input_values[i])

        try:
            # Engage each node in the network, in layer order
            for node in self._network:
                node.activate()
                node.propagate(self.nodes)

            return [self.nodes[self.inputs + i].output_value for i in range(self.outputs)]

        finally:
            # Reset all the nodes for the next feed forward
            for node in self.nodes.values():
                node.reset()

    def new_connection_weight(self) -> float:
        """
        Sample the weight of a new connection, according to 'weight_init_type'.
        """
        config = self._config
        if config.weight_init_type == "normal":
            weight = rng.normal(config.weight_init_mean, config.weight_init_stdev)
            return min(max(weight, config.weight_min_value), config.weight_max_value)
        if config.weight_init_type == "uniform":
            return rng.uniform(config.weight_min_value, config.weight_max_value)
        return 0.0

    def _nodes_by_layer(self) -> list[list[NodeGene]]:
        layers = [[] for _ in range(self.layers)]
        for node in self.nodes.values():
            layers[node.layer].append(node)
        return layers

    def _connected_pairs(self) -> set[tuple[int, int]]:
        return {(conn.node_in, conn.node_out) for conn in self.connections.values()}

    def _add_connection_gene(self, tracker: InnovationTracker, node_in: int, node_out: int,
                             weight: float, enabled: bool) -> ConnectionGene:
        innovation = tracker.get_innovation_number(node_in, node_out)
        conn = ConnectionGene(node_in, node_out, weight, innovation, enabled)
        self.connections[innovation] = conn
        return conn

    def fully_connect(self, tracker: InnovationTracker) -> None:
        """
        Connect every node of each layer to every node of the next layer.
        Pairs of nodes which are already connected are left alone.

        Parameters:
            tracker: the innovation ledger
        """
        connected = self._connected_pairs()
        by_layer  = self._nodes_by_layer()
        for layer in range(self.layers - 1):
            for node_from in by_layer[layer]:
                for node_to in by_layer[layer + 1]:
                    if (node_from.id, node_to.id) in connected:
                        continue
                    self._add_connection_gene(tracker, node_from.id, node_to.id,
                                              self.new_connection_weight(), True)
        self.generate_network()

    def fully_connected(self) -> bool:
        """
        Whether the network already has as many connections as there
        are pairs of nodes on adjacent layers.
        """
        by_layer = self._nodes_by_layer()
        max_connections = sum(len(by_layer[i]) * len(by_layer[i + 1]) for i in range(self.layers - 1))
        return max_connections <= len(self.connections)

    def add_connection(self, tracker: InnovationTracker) -> None:
        """
        Add a new connection between two existing nodes on different layers.

        The two nodes are drawn at random until they lie on different layers
        and are not already connected (in either direction). The connection
        goes from the node on the lower layer to the one on the higher layer.
        Nothing happens if the network is already fully connected.

        Parameters:
            tracker: the innovation ledger
        """
        if self.fully_connected():
            return

        node_list = list(self.nodes.values())
        connected = self._connected_pairs()

        def is_valid(n1: NodeGene, n2: NodeGene) -> bool:
            return (n1.layer != n2.layer and
                    (n1.id, n2.id) not in connected and
                    (n2.id, n1.id) not in connected)

        node1 = rng.choice(node_list)
        node2 = rng.choice(node_list)
        while not is_valid(node1, node2):
            node1 = rng.choice(node_list)
            node2 = rng.choice(node_list)

        if node1.layer > node2.layer:
            node1, node2 = node2, node1

        self._add_connection_gene(tracker, node1.id, node2.id,
                                  self.new_connection_weight(), self._config.enabled_default)
        self.generate_network()

    def remove_connection(self) -> None:
        """
        Remove a random connection (either enabled or disabled).
        """
        if not self.connections:
            return

        innovation = rng.choice(list(self.connections.keys()))
        del self.connections[innovation]
        self.generate_network()

    def add_node(self, tracker: InnovationTracker) -> None:
        """
        Split a random connection by inserting a new node.

        The split connection is disabled and replaced by two new connections:
        'from -> new node' with weight 1 and 'new node -> to' with the weight
        of the split connection. The new node goes on the layer right after the
        'from' node; if that is the layer of the 'to' node, a new layer is
        inserted by shifting every node at or above it by one.
        A genome without connections gets a new connection instead.

        Parameters:
            tracker: the innovation ledger
        """
        if not self.connections:
            self.add_connection(tracker)
            return

        split_conn = rng.choice(list(self.connections.values()))
        split_conn.enabled = False

        node_from = self.nodes[split_conn.node_in]
        node_to   = self.nodes[split_conn.node_out]

        new_node = NodeGene(self.next_node, self._config.activation_default, node_from.layer + 1)
        self.next_node += 1

        # Make room for the new node, if needed
        if new_node.layer == node_to.layer:
            for node in self.nodes.values():
                if node.layer >= new_node.layer:
                    node.layer += 1
            self.layers += 1

        self.nodes[new_node.id] = new_node

        enabled = self._config.enabled_default
        self._add_connection_gene(tracker, node_from.id, new_node.id, 1.0, enabled)
        self._add_connection_gene(tracker, new_node.id, node_to.id, split_conn.weight, enabled)

        self.generate_network()

    def remove_node(self) -> None:
        """
        Remove a random hidden node and every connection starting or ending at it.
        If this leaves its layer empty, the layer is removed.
        """
        hidden_nodes = self.hidden_nodes
        if not hidden_nodes:
            return

        node = rng.choice(hidden_nodes)
        self.connections = {innovation: conn for innovation, conn in self.connections.items()
                            if conn.node_in != node.id and conn.node_out != node.id}
        del self.nodes[node.id]

        if not any(n.layer == node.layer for n in self.nodes.values()):
            for n in self.nodes.values():
                if n.layer > node.layer:
                    n.layer -= 1
            self.layers -= 1

        self.generate_network()

    def mutate(self, tracker: InnovationTracker) -> None:
        """
        Apply to the current genome all possible mutation operations.

        In order: the activation function of every node, the weight and
        enabled flag of every connection, then the structural mutations (add
        connection, remove connection, add node, remove node), each happening
        with its configured probability. A genome without connections always
        gets one first.

        Parameters:
            tracker: the innovation ledger
        """
        config = self._config

        if not self.connections:
            self.add_connection(tracker)

        for node in self.nodes.values():
            node.mutate(config)

        for conn in self.connections.values():
            conn.mutate(config)

        if rng.randrange() < config.conn_add_prob:
            self.add_connection(tracker)

        if rng.randrange() < config.conn_delete_prob:
            self.remove_connection()

        if rng.randrange() < config.node_add_prob:
            self.add_node(tracker)

        if rng.randrange() < config.node_delete_prob:
            self.remove_node()

        self.generate_network()

    def crossover(self, other: 'Genome') -> 'Genome':
        """
        Perform NEAT crossover between this genome (the fitter parent) and another.

        NEAT crossover rules:
        - Matching genes: weight inherited from either parent with equal probability;
          if either parent has the gene disabled, the child gene is disabled 75% of
          the time (and enabled otherwise)
        - Disjoint/excess genes: inherited from the fitter parent only

        Since every gene of the child comes from (or matches a gene of) this
        genome, the child has the same nodes and layers as this genome.

        Parameters:
            other: the less fit parent

        Returns:
            New offspring genome (the parents are left untouched)
        """
        child = Genome(self._config, empty=True)
        child.inputs    = self.inputs
        child.outputs   = self.outputs
        child.layers    = self.layers
        child.next_node = self.next_node

        for node_id, node in self.nodes.items():
            child.nodes[node_id] = node.clone()

        for innovation, conn in self.connections.items():
            match = other.connections.get(innovation)

            # Disjoint or excess gene
            if match is None:
                child.connections[innovation] = conn.clone()
                continue

            # Matching gene
            enabled = True
            if not conn.enabled or not match.enabled:
                if rng.randrange() < 0.75:
                    enabled = False

            parent_gene = conn if rng.randrange() < 0.5 else match
            child.connections[innovation] = ConnectionGene(conn.node_in, conn.node_out,
                                                           parent_gene.weight, innovation, enabled)

        child.generate_network()
        return child

    def clone(self) -> 'Genome':
        """
        Deep copy of this genome (with a new ID).
        """
        clone = Genome(self._config, empty=True)
        clone.inputs    = self.inputs
        clone.outputs   = self.outputs
        clone.layers    = self.layers
        clone.next_node = self.next_node
        clone.fitness   = self.fitness

        for node_id, node in self.nodes.items():
            clone.nodes[node_id] = node.clone()
        for innovation, conn in self.connections.items():
            clone.connections[innovation] = conn.clone()

        clone.generate_network()
        return clone

    def is_equal(self, other: 'Genome') -> bool:
        """
        Whether two genomes have the same nodes and the same connections
        (same IDs, layers, activations, endpoints, weights, flags).
        """
        if len(self.nodes) != len(other.nodes) or len(self.connections) != len(other.connections):
            return False

        for node_id, node in self.nodes.items():
            other_node = other.nodes.get(node_id)
            if other_node is None or not node.is_equal(other_node):
                return False

        for innovation, conn in self.connections.items():
            other_conn = other.connections.get(innovation)
            if other_conn is None or not conn.is_equal(other_conn):
                return False

        return True

    def to_dict(self) -> dict:
        """
        Convert the genome to a dictionary representation.

        Returns:
            Dictionary with the following structure:
            {
                "id": "aZ3kP0qe", "inputs": 2, "outputs": 1, "layers": 3,
                "next_node": 4, "fitness": 0.0,
                "nodes": [
                    {"id": 0, "layer": 0, "activation": "sigmoid"},
                    {"id": 3, "layer": 1, "activation": "relu"}, ...
                ],
                "connections": [
                    {"innovation": 1, "from": 0, "to": 3, "enabled": true, "weight": 0.5}, ...
                ]
            }
        """
        return {
            "id"         : self.id,
            "inputs"     : self.inputs,
            "outputs"    : self.outputs,
            "layers"     : self.layers,
            "next_node"  : self.next_node,
            "fitness"    : self.fitness,
            "nodes"      : [node.to_dict() for node in self.nodes.values()],
            "connections": [conn.to_dict() for conn in self.connections.values()]
        }

    @classmethod
    def from_dict(cls, genome_dict: dict, config: Config | None = None) -> 'Genome':
        """
        Create a Genome from its dictionary representation (see 'to_dict()').

        Nodes are rebuilt first, then the connections between them, then the
        evaluation order.

        Parameters:
            genome_dict: Dictionary describing the genome
            config:      Configuration used by the genome's mutations;
                         a default Config if None

        Returns:
            A new Genome object with the specified structure

        Raises:
            CorruptSnapshot: if a field is missing or the structure is invalid
                             (unknown node, connection going backwards, ...)
        """
        if config is None:
            config = Config()

        genome = cls(config, empty=True)
        try:
            genome.id        = str(genome_dict["id"])
            genome.inputs    = int(genome_dict["inputs"])
            genome.outputs   = int(genome_dict["outputs"])
            genome.layers    = int(genome_dict["layers"])
            genome.next_node = int(genome_dict["next_node"])
            genome.fitness   = float(genome_dict["fitness"])

            for node_data in genome_dict["nodes"]:
                node_id    = int(node_data["id"])
                layer      = int(node_data["layer"])
                activation = node_data["activation"]
                if node_id in genome.nodes:
                    raise CorruptSnapshot(f"Duplicate node ID {node_id}")
                if activation not in activations:
                    raise CorruptSnapshot(f"Unknown activation function '{activation}' for node {node_id}")
                if not 0 <= layer < genome.layers:
                    raise CorruptSnapshot(f"Node {node_id} is on layer {layer}, "
                                          f"but the genome has {genome.layers} layers")
                genome.nodes[node_id] = NodeGene(node_id, activation, layer)

            for conn_data in genome_dict["connections"]:
                innovation = int(conn_data["innovation"])
                node_in    = int(conn_data["from"])
                node_out   = int(conn_data["to"])
                if innovation in genome.connections:
                    raise CorruptSnapshot(f"Duplicate innovation number {innovation}")
                if node_in not in genome.nodes or node_out not in genome.nodes:
                    raise CorruptSnapshot(f"Connection {innovation} references an unknown node "
                                          f"({node_in} -> {node_out})")
                if genome.nodes[node_in].layer >= genome.nodes[node_out].layer:
                    raise CorruptSnapshot(f"Connection {innovation} does not go to a higher layer "
                                          f"({node_in} -> {node_out})")
                genome.connections[innovation] = ConnectionGene(node_in, node_out,
                                                                float(conn_data["weight"]),
                                                                innovation,
                                                                bool(conn_data["enabled"]))
                InnovationTracker.advance_past(innovation)

        except (KeyError, TypeError, ValueError) as e:
            if isinstance(e, CorruptSnapshot):
                raise
            raise CorruptSnapshot(f"Bad genome description: {e!r}") from e

        for i in range(genome.inputs + genome.outputs):
            if i not in genome.nodes:
                raise CorruptSnapshot(f"Input/output node {i} is missing")
            if genome._is_input(i) and genome.nodes[i].layer != 0:
                raise CorruptSnapshot(f"Input node {i} is not on the first layer")
            if genome._is_output(i) and genome.nodes[i].layer != genome.layers - 1:
                raise CorruptSnapshot(f"Output node {i} is not on the last layer")

        for node_id, node in genome.nodes.items():
            if node.layer == 0 and not genome._is_input(node_id):
                raise CorruptSnapshot(f"Node {node_id} is on the first layer but is not an input node")

        # New nodes take their ID from 'next_node': it must be past every existing ID
        if genome.nodes and genome.next_node <= max(genome.nodes):
            raise CorruptSnapshot(f"'next_node' is {genome.next_node}, "
                                  f"but the genome already has node {max(genome.nodes)}")

        genome.generate_network()
        return genome

    def to_json(self, indent: int | None = None) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, text: str, config: Config | None = None) -> 'Genome':
        try:
            genome_dict = json.loads(text)
        except json.JSONDecodeError as e:
            raise CorruptSnapshot(f"Invalid JSON: {e}") from e
        return cls.from_dict(genome_dict, config)

    def save(self, file_path: str | Path) -> Path:
        """
        Save the genome to a JSON file.
        Missing directories are created; '.json' is appended if the path has no extension.

        Returns:
            The path of the file written
        """
        path = Path(file_path)
        if not path.suffix:
            path = path.with_suffix(".json")
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_json(indent=4), encoding="utf-8")
        return path

    @classmethod
    def load(cls, file_path: str | Path, config: Config | None = None) -> 'Genome':
        """
        Load a genome saved with 'save()'.

        Raises:
            CorruptSnapshot: if the file content is not a valid genome
            OSError:         if the file cannot be read
        """
        return cls.from_json(Path(file_path).read_text(encoding="utf-8"), config)

    def __str__(self):
        node_genes_str = ''.join(str(node) for node in self._network)
        conn_genes_str = ''.join(str(conn) for conn in self.connections.values())
        return (f"Genome {self.id} (layers={self.layers}, fitness={self.fitness})\n"
                f"Nodes: {node_genes_str}\nConns: {conn_genes_str}")
