"""Storage collaborators: hosted Supabase tables and local audit logs."""
