"""
Prompt template for Gemini code analysis.

Gemini gives no schema guarantee here, so the prompt lists the keys and
shows one filled-in example of the object it must return.
"""
from __future__ import annotations

import json


ANALYSIS_KEYS = (
    "time_complexity",
    "time_complexity_explanation",
    "space_complexity",
    "space_complexity_explanation",
    "optimization_suggestions",
    "identified_problem",
    "alternative_implementations",
)

EXAMPLE_ANALYSIS = {
    "time_complexity": "O(N)",
    "time_complexity_explanation": "Each node is visited once.",
    "space_complexity": "O(W)",
    "space_complexity_explanation": "The queue holds the nodes of the widest level.",
    "optimization_suggestions": [
        "Use an iterative approach to avoid stack overflow for very deep trees.",
        "Return early when the tree is empty.",
    ],
    "identified_problem": "Height of a Binary Tree (Level Order Traversal)",
    "alternative_implementations": [
        {
            "title": "Recursive Solution",
            "code": (
                "int height(Node* root) {\n"
                "  if (root == nullptr) return 0;\n"
                "  return 1 + max(height(root->left), height(root->right));\n"
                "}"
            ),
        },
        {
            "title": "Iterative Solution with Depth-First Search (DFS)",
            "code": "int height(Node* root) {\n  // ... DFS with an explicit stack ...\n}",
        },
    ],
}

INSTRUCTIONS = """You are a code analyzer AI. Analyze the following {language} code snippet.

1. **Time Complexity:** State the Big O time complexity and give a concise explanation.
2. **Space Complexity:** State the Big O space complexity and give a concise explanation.
3. **Optimization Suggestions:** Give actionable suggestions to improve performance or readability. If no significant optimization is apparent, say so.
4. **Identified Problem/Algorithm:** Briefly name the problem the code solves or the algorithm it implements (e.g. "Calculates the height of a binary tree using BFS").
5. **Alternative Implementations:** Give 1-2 alternative implementations of the code or of the problem it solves, each with a title (e.g. "Recursive Solution") and the code. If no meaningful alternative exists, return an empty array.

Respond with ONLY a JSON object, no markdown and no text around it. It must have exactly these keys: {keys}.
Example of the expected shape:
{example}
"""


def build_analysis_prompt(code: str, language: str) -> str:
    """
    Build the analysis prompt for Gemini.

    Args:
        code: Source code, embedded verbatim
        language: Language tag, also used to label the code fence

    Returns:
        Formatted prompt string
    """
    instructions = INSTRUCTIONS.format(
        language=language,
        keys=", ".join(ANALYSIS_KEYS),
        example=json.dumps(EXAMPLE_ANALYSIS, indent=2),
    )
    return f"{instructions}\nCode:\n```{language}\n{code}\n```\n"
