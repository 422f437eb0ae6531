"""Shared pytest fixtures: a small TypeScript content corpus on disk."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

CONFIG_BACKEND = r"""
import { ClaudeMdConfig } from '../types';

export const backendConfigs: ClaudeMdConfig[] = [
  {
    id: 'a',
    title: 'A',
    description: 'Does X. More.',
    category: 'Claude.md Configurations',
    content: `# Claude.md - A

Use \`npm run dev\` to start.

\`\`\`
src/
├── routes/   # [api]
└── app.ts
\`\`\`
`,
  },
  {
    id: 'b',
    title: 'B',
    slug: 'b-slug',
    description: 'Second config',
    category: 'Backend Development', // not in the category table
    tags: ['node', 'api'],
    difficulty: 'INTERMEDIATE',
    language: 'TypeScript',
    framework: 'Express.js',
    content: '# B',
  },
];
"""

PROMPT_SECURITY = r"""
export default {
  id: 'security-audit-expert',
  title: 'Security Audit Expert',
  slug: 'security-audit-expert',
  description: 'Comprehensive security audit prompt. Covers OWASP.',
  category: 'Prompt Templates',
  tags: ['security', 'audit'],
  difficulty: 'ADVANCED',
  prompt: `You are a Senior Security Engineer.

curl -H "Authorization: Bearer <token>" \\
     https://api.example.com/users/{id}`,
  variables: [],
  examples: [],
  author: {
    name: 'Claude Code Directory',
    url: 'https://claudecode.directory'
  },
  lastUpdated: '2024-02-15'
};
"""

PROMPTS_BARREL = r"""
import { PromptTemplate } from './types';

export const promptTemplates: PromptTemplate[] = [
  { id: 'barrel-only', title: 'Barrel', description: 'Must never be read.' },
];
"""

TOOL_CODEGEN = r"""
export default {
  id: 'code-generator',
  title: 'Code Generator',
  slug: 'code-generator',
  tagline: 'Intelligent code generation',
  description: 'Intelligent code generation and scaffolding tool.',
  category: 'Tools & CLI',
  type: 'CLI',
  url: 'https://github.com/enterprise/code-generator',
  tags: ['code-generation'],
  stats: {
    votes: 12,
    copies: 3
  },
  featured: true,
  difficulty: 'ADVANCED',
  lastUpdated: '2024-01-31',
  content: `# Code Generator

token: '\${JIRA_TOKEN}'`
};
"""

TOOL_BROKEN = r"""
export default {
  id: 'broken-tool',
  title: 'Broken',
  description: computeDescription(),
};
"""

CATEGORIES = r"""
import type { StaticCategory } from './types';

const categories: StaticCategory[] = [
  {
    id: 'claude-configs',
    name: 'Claude.md Configurations',
    slug: 'claude-configs',
    description: 'Ready-to-use Claude.md configuration files.',
    icon: '📋',
    color: '#F59E0B',
    order: 1,
    resourceCount: 17  // Updated: actual count
  },
  {
    id: 'prompt-templates',
    name: 'Prompt Templates',
    slug: 'prompts',
    description: 'Prompt templates.',
    icon: '💬',
    color: '#10B981',
    order: 2,
    resourceCount: 14,
    featured: true
  },
  {
    id: 'tools-cli',
    name: 'Tools & CLI',
    slug: 'tools',
    description: 'Command-line tools.',
    icon: '🛠️',
    color: '#8B5CF6',
    order: 3,
    resourceCount: 19
  }
];

const getCategoryById = (id: string): StaticCategory | undefined => {
  return categories.find(category => category.id === id);
};

module.exports = {
  categories,
  getCategoryById
};
"""


def write_file(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(content).lstrip("\n"), encoding="utf-8")
    return path


@pytest.fixture
def corpus(tmp_path: Path) -> Path:
    """Project root with three collections and a categories file.

    One tool file (broken-tool.ts) calls a function and must be skipped.
    """
    data = tmp_path / "data"
    write_file(data / "claude-configs" / "backend.ts", CONFIG_BACKEND)
    write_file(data / "prompts" / "security-audit-expert.ts", PROMPT_SECURITY)
    write_file(data / "prompts" / "prompts.ts", PROMPTS_BARREL)
    write_file(data / "tools" / "code-generator.ts", TOOL_CODEGEN)
    write_file(data / "tools" / "broken-tool.ts", TOOL_BROKEN)
    write_file(data / "tools" / "tools.ts", "export const tools = [];\n")
    write_file(data / "categories.ts", CATEGORIES)
    return tmp_path
