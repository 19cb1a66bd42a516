"""HR Portal package.

Feature modules (employees, salaries, projects, tasks, assistant, ...) each
follow the same shape: a frozen dataclass model, a repository Protocol with a
MySQL implementation, a service holding the business rules and a thin Flask
controller exposing the JSON API.
"""
