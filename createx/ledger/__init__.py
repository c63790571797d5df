"""World-state backends the factory deploys through."""
