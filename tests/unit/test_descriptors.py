import unittest

from a4e.descriptors import (
    AgentDescriptor,
    AgentKind,
    MaintenanceExtension,
    ProductionExtension,
    RegulatoryExtension,
)


class TestAgentDescriptor(unittest.TestCase):

    def test_outputs_are_keyed_by_kind(self):
        descriptor = AgentDescriptor(
            kind=AgentKind.MAINTENANCE,
            agent_id="AGENT123",
            agent_alias_id="ALIAS123",
            extension=MaintenanceExtension(default_database_name="maintenance_db"),
        )
        self.assertEqual(descriptor.outputs(), {
            "maintenanceAgentId": "AGENT123",
            "maintenanceAgentAliasId": "ALIAS123",
        })

    def test_production_extension(self):
        descriptor = AgentDescriptor(
            kind=AgentKind.PRODUCTION,
            agent_id="AGENT1",
            agent_alias_id="ALIAS1",
            extension=ProductionExtension("production_db", database=object(), athena_workgroup=object()),
        )
        self.assertEqual(descriptor.extension.default_database_name, "production_db")

    def test_mismatched_extension_rejected(self):
        with self.assertRaises(ValueError):
            AgentDescriptor(
                kind=AgentKind.REGULATORY,
                agent_id="AGENT1",
                agent_alias_id="ALIAS1",
                extension=MaintenanceExtension(default_database_name="maintenance_db"),
            )
        with self.assertRaises(ValueError):
            AgentDescriptor(kind=AgentKind.PRODUCTION, agent_id="AGENT1", agent_alias_id="ALIAS1")

    def test_petrophysics_carries_no_extension(self):
        AgentDescriptor(kind=AgentKind.PETROPHYSICS, agent_id="AGENT1", agent_alias_id="ALIAS1")
        with self.assertRaises(ValueError):
            AgentDescriptor(
                kind=AgentKind.PETROPHYSICS,
                agent_id="AGENT1",
                agent_alias_id="ALIAS1",
                extension=RegulatoryExtension(metric=None),
            )

    def test_ids_required(self):
        with self.assertRaises(ValueError):
            AgentDescriptor(kind=AgentKind.PETROPHYSICS, agent_id="", agent_alias_id="ALIAS1")


if __name__ == '__main__':
    unittest.main()
