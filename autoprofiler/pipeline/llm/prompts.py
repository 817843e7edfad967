"""
All LLM prompts consolidated in one place
"""
from typing import List


# ============================================
# TARGET SCHEMAS (shown to the model)
# ============================================

STRATEGY_SCHEMA_TEMPLATE = """{
  "strategies": [
    {
      "name": "Strategy Name",
      "description": "Strategy Description"
    }
  ]
}"""

IMPLEMENTATION_SCHEMA_TEMPLATE = """{
  "query": "Modified SQL query",
  "tables": [
    "List of modified table creation statements, including indexes"
  ]
}"""


# ============================================
# STRATEGY GENERATION PROMPT
# ============================================

def build_strategy_prompt(query: str, tables: List[str], dialect: str = "postgres") -> str:
    """Build the prompt enumerating optimization strategies for a query"""
    table_lines = "\n".join(f"- {table}" for table in tables) if tables else "- (none provided)"

    return f"""# {dialect.capitalize()} SQL Profile
Generate an enumerated list of strategies to improve the memory and execution time of the {dialect} query {query}
Consider the following tables:
{table_lines}

Available strategies:
- Refactoring: Simplify complex queries or functions.
- Indexing:
  - Create indexes on columns that are frequently used in WHERE, JOIN, or ORDER BY clauses.
  - Select the most convenient index type for each column.
  - Optimize index size and storage.
  - Use partial indexes for selective data.
  - Use covering indexes to reduce disk I/O.
- Partitioning: Divide large tables into smaller, more manageable pieces.
- Query Optimization: Rewrite queries to reduce the number of rows scanned.
- Caching: Use caching mechanisms to store frequently accessed data.

# Output
Output format only JSON without Markdown, or any additional text.
The response must be in the following schema:
{STRATEGY_SCHEMA_TEMPLATE}

## Example:

### Input
- Query: SELECT * FROM users WHERE age > 18;
- Tables:
  - Create table users (id serial primary key, name varchar(100), age integer);
  - Create table orders (id serial primary key, user_id integer references users(id), product varchar(100), quantity integer);

### Output
{{
  "strategies": [
    {{
      "name": "Indexing",
      "description": "Create an index on the 'age' column in the 'users' table to improve the performance of the query."
    }}
  ]
}}
"""


# ============================================
# STRATEGY IMPLEMENTATION PROMPT
# ============================================

def build_implementation_prompt(
    strategy_name: str,
    strategy_description: str,
    query: str,
    tables: List[str]
) -> str:
    """Build the prompt asking for a modified query and table statements"""
    joined_tables = ";\n".join(table.strip().rstrip(";").strip() for table in tables)

    return f"""# Task: SQL Query Optimization and Modification

You are an expert SQL developer tasked with optimizing and modifying existing SQL queries based on provided strategies.

## Instructions:

1.  **Understand the Strategy:** Carefully analyze the provided "Strategy" and "Description".
2.  **Apply the Strategy:** Implement the specified strategy to the given "Query" and consider the existing "Tables".
3.  **Generate Output:** Return the modified SQL query and any necessary table modifications (including index creation, table alterations, etc.) in the JSON format specified below.
4.  **Preserve Original Query:** If the strategy does not necessitate changes to the original query, return the original query in the "query" field of the JSON output.
5.  **Secure the SQL generation:** Ensure that the generated SQL is valid and secure.

## Input Format:

Strategy: {strategy_name}
Description: {strategy_description}
Query: {query}
Tables: {joined_tables}

## Output Format:

```json
{IMPLEMENTATION_SCHEMA_TEMPLATE}
```

## Example:

### Input:
Strategy: Indexing
Description: Indexing on 'age' column in 'users' table
Query: SELECT * FROM users WHERE age > 18;
Tables: CREATE TABLE IF NOT EXISTS users (id INT PRIMARY KEY, name VARCHAR(255), age INT, email VARCHAR(255));

### Output:
```json
{{
  "query": "SELECT * FROM users WHERE age > 18;",
  "tables": [
    "CREATE TABLE IF NOT EXISTS users (id INT PRIMARY KEY, name VARCHAR(255), age INT, email VARCHAR(255)); CREATE INDEX idx_users_age ON users(age);"
  ]
}}
```
"""


# ============================================
# REPAIR PROMPTS
# ============================================

def build_json_repair_prompt(response: str, error: str, schema: str) -> str:
    """Build the prompt asking the model to correct malformed JSON"""
    return f"""Correct the following JSON response to conform a valid JSON object using the provided schema.

**JSON Response (to be corrected):**
{response}

**Error Encountered:**
{error}

**Target JSON Schema:**
```json
{schema}
```

**Instructions:**
* Identify and fix all errors in the JSON response based on the schema.
* Ensure the corrected JSON is valid and adheres strictly to the schema.
* Return ONLY the corrected JSON.
* Check if the JSON contains all required commas (','), and ensure they are properly placed.
"""


def build_sql_repair_prompt(query: str, error: str) -> str:
    """Build the SQL debugging prompt fed with the oracle diagnostic"""
    return f"""# Task: SQL Query Debugging and Optimization

You are an expert SQL developer tasked with debugging, fixing, and optimizing the provided SQL query.

## Instructions:

1.  **Analyze the Query and Error:** Carefully examine the provided SQL query and the reported error message.
2.  **Diagnose the Issue:** Identify the specific cause of the error (syntax, logic, data type mismatch, etc.).
3.  **Correct the Query:** Fix the identified error(s) to ensure the query executes without errors and produces the intended result.
4.  **Preserve Intent:** Keep every statement of the original SQL (including index and table statements); only fix what the error requires.
5.  **Provide the Corrected Query:** Return only the corrected SQL without any additional text or comments.

## Example:

**Original Query:**
SELECT * FROM users WHEREIN age > 18;

**Error:**
Syntax error: 'WHEREIN' is not a valid keyword.

**Corrected Query:**
SELECT * FROM users WHERE age > 18;

---

## Case:

**SQL (to be corrected):**
{query}

**Error Encountered:**
{error}

**Corrected SQL Query:**
"""
