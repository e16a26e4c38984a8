#!/usr/bin/env python3
"""
Script de prueba contra una instancia del User Service en ejecución
"""
import asyncio
import sys
import time

import aiohttp


BASE_URL = "http://localhost:8081"


async def smoke_user_service(username: str) -> bool:
    """Probar los endpoints del User Service"""
    print("🧪 Iniciando pruebas del User Service...")
    ok = True
    
    async with aiohttp.ClientSession() as session:
        
        # 1. Health Check
        print("\n1️⃣ Testing Health Check...")
        async with session.get(f"{BASE_URL}/health") as resp:
            if resp.status == 200:
                data = await resp.json()
                print(f"   ✅ Health Status: {data['status']}")
                print(f"   📊 Service: {data['service_name']} v{data['version']}")
            else:
                print(f"   ❌ Health check failed: {resp.status}")
                ok = False
        
        # 2. Produce
        print(f"\n2️⃣ Testing Produce ({username})...")
        start_time = time.time()
        async with session.post(f"{BASE_URL}/produce/{username}") as resp:
            elapsed = (time.time() - start_time) * 1000
            data = await resp.json()
            if resp.status == 200:
                payload = data["payload"]
                print(f"   ✅ Event: {data['meta']['event_id']} ({data['meta']['type']})")
                print(f"   👤 {payload['username']} -> {payload['first_name']} {payload['last_name']}")
                print(f"   📋 Followers: {len(payload['followers'])}, repos: {len(payload['repos'])}")
                print(f"   ⚡ Response time: {elapsed:.2f}ms")
            else:
                print(f"   ❌ Produce failed: {resp.status} {data.get('error_code')}")
                ok = False
        
        # 3. Update
        print(f"\n3️⃣ Testing Update ({username})...")
        update_data = {
            "email": "smoke@example.com",
            "first_name": "Smoke",
            "last_name": "Test",
            "time_zone_id": "America/Bogota"
        }
        async with session.put(f"{BASE_URL}/users/{username}", json=update_data) as resp:
            data = await resp.json()
            if resp.status == 200 and data["payload"]["email"] == update_data["email"]:
                print(f"   ✅ Event: {data['meta']['event_id']}")
                print(f"   🕒 Time zone: {data['payload']['time_zone_id']}")
            else:
                print(f"   ❌ Update failed: {resp.status}")
                ok = False
        
        # 4. Usuario inexistente
        print("\n4️⃣ Testing Not Found...")
        async with session.post(f"{BASE_URL}/produce/this-user-should-not-exist-0000") as resp:
            if resp.status == 404:
                print("   ✅ 404 recibido")
            else:
                print(f"   ⚠️ Status inesperado: {resp.status}")
    
    return ok


if __name__ == "__main__":
    print("🚀 User Service Smoke Test")
    print("=" * 50)
    
    user = sys.argv[1] if len(sys.argv) > 1 else "octocat"
    try:
        passed = asyncio.run(smoke_user_service(user))
    except aiohttp.ClientError as e:
        print(f"\n\n❌ No se pudo conectar con {BASE_URL}: {e}")
        sys.exit(1)
    
    print("\n" + "=" * 50)
    print("✅ Smoke test completed!" if passed else "💥 Smoke test failed")
    sys.exit(0 if passed else 1)
