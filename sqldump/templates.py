"""
Section templates for the dump file.
"""

from jinja2 import DictLoader, Environment, StrictUndefined

from .catalog import quote_identifier
from .models import TemplateVars

HEADER = 'header'
TABLE_SCHEMA = 'table_schema'
TABLE_DATA = 'table_data'
FOOTER = 'footer'

TEMPLATES = {
    HEADER: """\
-- {{ tool }} {{ version }}
-- Backup Started:	{{ started }}
-- ------------------------------------------------------
-- Server version	{{ server_version }}

/*!40101 SET @OLD_CHARACTER_SET_CLIENT=@@CHARACTER_SET_CLIENT */;
/*!40101 SET @OLD_CHARACTER_SET_RESULTS=@@CHARACTER_SET_RESULTS */;
/*!40101 SET @OLD_COLLATION_CONNECTION=@@COLLATION_CONNECTION */;
/*!40101 SET NAMES utf8mb4 */;
/*!40103 SET @OLD_TIME_ZONE=@@TIME_ZONE */;
/*!40103 SET TIME_ZONE='+00:00' */;
/*!40014 SET @OLD_UNIQUE_CHECKS=@@UNIQUE_CHECKS, UNIQUE_CHECKS=0 */;
/*!40014 SET @OLD_FOREIGN_KEY_CHECKS=@@FOREIGN_KEY_CHECKS, FOREIGN_KEY_CHECKS=0 */;
/*!40101 SET @OLD_SQL_MODE=@@SQL_MODE, SQL_MODE='NO_AUTO_VALUE_ON_ZERO' */;
/*!40111 SET @OLD_SQL_NOTES=@@SQL_NOTES, SQL_NOTES=0 */;
""",

    TABLE_SCHEMA: """
--
-- Table structure for table {{ name }}
--

DROP TABLE IF EXISTS {{ name }};
/*!40101 SET @saved_cs_client     = @@character_set_client */;
/*!40101 SET character_set_client = utf8mb4 */;
{{ schema_sql }};
/*!40101 SET character_set_client = @saved_cs_client */;

""",

    TABLE_DATA: """\
--
-- Dumping data for table {{ name }}
--

LOCK TABLES {{ name }} WRITE;
/*!40000 ALTER TABLE {{ name }} DISABLE KEYS */;
{% if values %}
INSERT INTO {{ name }} VALUES {{ values }};
{% endif %}
/*!40000 ALTER TABLE {{ name }} ENABLE KEYS */;
UNLOCK TABLES;
""",

    FOOTER: """
/*!40101 SET SQL_MODE=@OLD_SQL_MODE */;
/*!40014 SET FOREIGN_KEY_CHECKS=@OLD_FOREIGN_KEY_CHECKS */;
/*!40014 SET UNIQUE_CHECKS=@OLD_UNIQUE_CHECKS */;
/*!40103 SET TIME_ZONE=@OLD_TIME_ZONE */;
/*!40101 SET CHARACTER_SET_CLIENT=@OLD_CHARACTER_SET_CLIENT */;
/*!40101 SET CHARACTER_SET_RESULTS=@OLD_CHARACTER_SET_RESULTS */;
/*!40101 SET COLLATION_CONNECTION=@OLD_COLLATION_CONNECTION */;
/*!40111 SET SQL_NOTES=@OLD_SQL_NOTES */;

-- Backup Completed: {{ completed }}
""",
}

_env = Environment(
    loader=DictLoader(TEMPLATES),
    autoescape=False,
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
    undefined=StrictUndefined,
)


def render(template_name: str, variables: dict) -> str:
    """Render a named section template."""
    return _env.get_template(template_name).render(**variables)


def template_context(template_vars: TemplateVars) -> dict:
    """Template variables for a table section. The name is rendered backtick-quoted."""
    return {
        'name': quote_identifier(template_vars.name),
        'schema_sql': template_vars.schema_sql,
        'values': template_vars.values,
    }
