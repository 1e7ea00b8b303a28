from .mermaid import MermaidGenerator, generate_class_diagram

__all__ = ["MermaidGenerator", "generate_class_diagram"]
