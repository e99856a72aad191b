"""
Result shapes for clustering, similarity, neighbor and visualization results.

These models only describe data exchanged with the engines that produce
them; nothing here clusters, searches or lays out anything.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Annotated, Any, Dict, List, Literal, Optional, Union
from datetime import datetime

Vector = List[float]

SimilarityMethod = Literal["cosine", "euclidean", "hybrid"]
ClusteringAlgorithm = Literal["kmeans", "hierarchical", "dbscan", "semantic", "graph"]
LayoutAlgorithm = Literal["force-directed", "hierarchical", "radial", "grid"]


class ResultModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


# ===== Similarity =====

class SimilarityOptions(ResultModel):
    method: SimilarityMethod = "cosine"
    explain: bool = False
    include_breakdown: bool = False
    threshold: Optional[float] = None


class SimilarityBreakdown(ResultModel):
    semantic: Optional[float] = None
    taxonomic: Optional[float] = None
    contextual: Optional[float] = None


class SharedHierarchy(ResultModel):
    shared_parent: Optional[str] = None
    distance: Optional[float] = None


class SimilarityResult(ResultModel):
    score: float
    method: Optional[SimilarityMethod] = None
    confidence: Optional[float] = None
    explanation: Optional[str] = None
    hierarchy: Optional[SharedHierarchy] = None
    breakdown: Optional[SimilarityBreakdown] = None

    @field_validator('confidence')
    @classmethod
    def confidence_in_unit_range(cls, v):
        if v is not None and not 0.0 <= v <= 1.0:
            raise ValueError('confidence must be between 0 and 1')
        return v


# ===== Neighbors =====

class NeighborOptions(ResultModel):
    limit: int = 10
    radius: Optional[float] = None
    min_similarity: Optional[float] = None
    include_vectors: bool = False
    include_metadata: bool = True
    sort_by: Literal["similarity", "importance", "recency"] = "similarity"


class Neighbor(ResultModel):
    id: str
    similarity: float
    distance: Optional[float] = None
    type: Optional[str] = None
    connections: Optional[int] = None
    vector: Optional[Vector] = None
    metadata: Optional[Dict[str, Any]] = None


class NeighborEdge(ResultModel):
    source: str
    target: str
    weight: float
    type: Optional[str] = None


class NeighborsResult(ResultModel):
    center: str
    neighbors: List[Neighbor]
    edges: Optional[List[NeighborEdge]] = None
    query_time_ms: Optional[float] = None
    has_more: bool = False


# ===== Hierarchy =====

class HierarchyNode(ResultModel):
    id: str
    type: Optional[str] = None
    similarity: float


class HierarchySelf(ResultModel):
    id: str
    type: Optional[str] = None
    vector: Vector


class HierarchyOptions(ResultModel):
    max_depth: int = 3
    include_siblings: bool = True
    include_children: bool = True
    sibling_limit: int = 10


class SemanticHierarchy(ResultModel):
    self_node: HierarchySelf = Field(alias="self")
    parent: Optional[HierarchyNode] = None
    grandparent: Optional[HierarchyNode] = None
    root: Optional[HierarchyNode] = None
    siblings: Optional[List[HierarchyNode]] = None
    children: Optional[List[HierarchyNode]] = None
    depth: Optional[int] = None

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


# ===== Clusters =====

class SemanticCluster(ResultModel):
    id: str
    centroid: Vector
    members: List[str]
    label: Optional[str] = None
    confidence: float
    depth: Optional[int] = None
    size: Optional[int] = None
    level: Optional[int] = None
    cohesion: Optional[float] = None


class DomainCluster(SemanticCluster):
    domain: str
    domain_confidence: float
    cross_domain_members: Optional[List[str]] = None


class TemporalCluster(SemanticCluster):
    time_window: "TimeWindow"
    trend: Optional[Literal["increasing", "decreasing", "stable", "cyclical"]] = None
    peak_time: Optional[datetime] = None


class ExplainableCluster(SemanticCluster):
    explanation: str
    key_features: List[str]
    representative_members: List[str]


class ConfidentCluster(SemanticCluster):
    member_confidence: Dict[str, float]
    uncertain_members: List[str] = []


class KMeansMetadata(ResultModel):
    algorithm: Literal["kmeans"] = "kmeans"
    k: int
    iterations: int
    inertia: Optional[float] = None
    converged: bool = True


class HierarchicalMetadata(ResultModel):
    algorithm: Literal["hierarchical"] = "hierarchical"
    linkage: Literal["single", "complete", "average", "ward"] = "average"
    levels: int
    distance_threshold: Optional[float] = None


class DBSCANMetadata(ResultModel):
    algorithm: Literal["dbscan"] = "dbscan"
    eps: float
    min_samples: int
    noise_points: List[str] = []


class SemanticMetadata(ResultModel):
    algorithm: Literal["semantic"] = "semantic"
    similarity_threshold: float
    label_source: Optional[str] = None


class GraphMetadata(ResultModel):
    algorithm: Literal["graph"] = "graph"
    modularity: Optional[float] = None
    resolution: float = 1.0
    edge_count: int = 0


ClusteringMetadata = Annotated[
    Union[KMeansMetadata, HierarchicalMetadata, DBSCANMetadata, SemanticMetadata, GraphMetadata],
    Field(discriminator="algorithm"),
]


class ClusteringOptions(ResultModel):
    algorithm: ClusteringAlgorithm = "semantic"
    max_clusters: Optional[int] = None
    min_cluster_size: int = 2
    threshold: Optional[float] = None
    sample_size: Optional[int] = None
    strategy: Optional[Literal["random", "diverse", "recent"]] = None
    include_outliers: bool = False


class DomainClusteringOptions(ClusteringOptions):
    domain_field: str = "domain"
    preserve_domain_boundaries: bool = True


class TemporalClusteringOptions(ClusteringOptions):
    time_field: str = "created_at"
    windows: List["TimeWindow"] = []
    overlap_strategy: Literal["merge", "separate", "hierarchical"] = "separate"


class StreamClusteringOptions(ClusteringOptions):
    batch_size: int = 1000
    max_batches: Optional[int] = None
    update_interval_ms: Optional[int] = None


class ClusteringResult(ResultModel):
    clusters: List[SemanticCluster]
    metadata: ClusteringMetadata
    outliers: List[str] = []
    processing_time_ms: Optional[float] = None
    item_count: int = 0


class StreamingBatch(ResultModel):
    batch_number: int
    clusters: List[SemanticCluster]
    items_processed: int
    total_items: Optional[int] = None
    is_complete: bool = False
    progress: Optional[float] = None


class TimeWindow(ResultModel):
    start: datetime
    end: datetime
    label: Optional[str] = None

    @field_validator('end')
    @classmethod
    def end_after_start(cls, v, info):
        start = info.data.get('start')
        if start is not None and v < start:
            raise ValueError('end must not be before start')
        return v


class ClusterFeedback(ResultModel):
    cluster_id: str
    action: Literal["merge", "split", "relabel", "move_member", "confirm"]
    target_cluster_id: Optional[str] = None
    member_ids: List[str] = []
    new_label: Optional[str] = None


# ===== Outliers =====

class OutlierOptions(ResultModel):
    threshold: float = 0.5
    method: Literal["isolation", "lof", "statistical"] = "isolation"
    limit: Optional[int] = None


class Outlier(ResultModel):
    id: str
    score: float
    reason: Optional[str] = None
    nearest_cluster: Optional[str] = None


# ===== Visualization =====

class VisualizationOptions(ResultModel):
    layout: LayoutAlgorithm = "force-directed"
    dimensions: Literal[2, 3] = 2
    max_nodes: int = 1000
    include_edges: bool = True
    cluster_colors: bool = True


class VisualizationNode(ResultModel):
    id: str
    x: float
    y: float
    z: Optional[float] = None
    type: Optional[str] = None
    cluster: Optional[str] = None
    size: Optional[float] = None
    label: Optional[str] = None


class VisualizationEdge(ResultModel):
    source: str
    target: str
    weight: float
    type: Optional[str] = None


class LayoutBounds(ResultModel):
    width: float
    height: float
    depth: Optional[float] = None


class VisualizationLayout(ResultModel):
    dimensions: int
    algorithm: str
    bounds: Optional[LayoutBounds] = None


class VisualizationCluster(ResultModel):
    id: str
    color: str
    label: Optional[str] = None
    size: int


class VisualizationResult(ResultModel):
    format: LayoutAlgorithm
    nodes: List[VisualizationNode]
    edges: List[VisualizationEdge] = []
    layout: Optional[VisualizationLayout] = None
    clusters: Optional[List[VisualizationCluster]] = None


# ===== Monitoring and configuration =====

class PerformanceMetrics(ResultModel):
    operation: str
    duration_ms: float
    items_processed: int = 0
    memory_bytes: Optional[int] = None
    cache_hits: int = 0
    cache_misses: int = 0


class NeuralAPIConfig(ResultModel):
    cache_size: int = 1000
    default_algorithm: ClusteringAlgorithm = "semantic"
    similarity_metric: SimilarityMethod = "cosine"
    performance_tracking: bool = False
    max_memory_mb: Optional[int] = None


TemporalCluster.model_rebuild()
TemporalClusteringOptions.model_rebuild()


# ===== Errors =====

class NeuralAPIError(Exception):
    """Error reported by an engine producing the results above."""

    def __init__(self, message: str, code: str = "NEURAL_API_ERROR", context: Dict[str, Any] = None):
        super().__init__(message)
        self.code = code
        self.context = context or {}


class ClusteringError(NeuralAPIError):
    def __init__(self, message: str, context: Dict[str, Any] = None):
        super().__init__(message, code="CLUSTERING_ERROR", context=context)


class SimilarityError(NeuralAPIError):
    def __init__(self, message: str, context: Dict[str, Any] = None):
        super().__init__(message, code="SIMILARITY_ERROR", context=context)
